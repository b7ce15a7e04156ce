"""
Text output of solver results.

One line per cell, whitespace separated:

    x field0 field1 field2
"""

import numpy as np
from pathlib import Path
from typing import List, Tuple

from .eos import VELOCITY, PRESSURE

FIELDS = ('primitive', 'conserved')


def solution_fields(solver, field: str = 'primitive') -> Tuple[np.ndarray, np.ndarray]:
    """
    Coordinates and three fields of a solver's current solution.

    Args:
        solver: Solver1D instance
        field: 'primitive' for (rho, u, p) or 'conserved' for (rho, rhoU, rhoE)

    Returns:
        (x, values) with values of shape (3, n_cells)
    """
    x = solver.mesh.coordinates()
    if field == 'primitive':
        P = solver.get_extended_state()
        values = np.stack((P[0], P[VELOCITY], P[PRESSURE]))
    elif field == 'conserved':
        values = solver.get_conserved()
    else:
        raise ValueError(f"Unknown output field: {field}. Options: {', '.join(FIELDS)}")
    return x, values


def write_solution(path, x: np.ndarray, values: np.ndarray) -> Path:
    """Write x and the rows of values, one cell per line."""
    path = Path(path)
    data = np.column_stack((x, np.asarray(values).T))
    np.savetxt(path, data, fmt='%.10e', delimiter=' ')
    return path


def read_solution(path) -> Tuple[np.ndarray, np.ndarray]:
    """Read a file written by write_solution. Returns (x, values)."""
    data = np.loadtxt(Path(path), ndmin=2)
    return data[:, 0], data[:, 1:].T


def format_cells(values: np.ndarray, n: int = 10) -> List[str]:
    """Summary lines for the first n cells."""
    n = min(n, values.shape[1])
    return [f"Cell [{i}] state = {values[0, i]:.2f}, {values[1, i]:.2f}, {values[2, i]:.2f}"
            for i in range(n)]
