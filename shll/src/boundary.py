"""
Boundary conditions for the 1D split-flux solver.

Boundaries are imposed through one ghost column on each side of the
conserved-state buffer. The ghost state then goes through the equation of
state and the flux splitting like any other cell, so the boundary cells use
the same update formula as the interior.
"""

import numpy as np
from abc import ABC, abstractmethod

from .state import MOMENTUM

SIDES = ('left', 'right')


def _check_side(side: str):
    if side not in SIDES:
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")


class BoundaryCondition(ABC):
    """Abstract base class for boundary conditions."""

    name = ''

    @abstractmethod
    def apply(self, U: np.ndarray, side: str) -> np.ndarray:
        """
        Apply boundary condition to ghost cells.

        Args:
            U: Conservative variables including ghost cells, shape (3, n_cells + 2)
            side: 'left' or 'right'

        Returns:
            Modified U with ghost cells set
        """
        pass


class ReflectiveWallBC(BoundaryCondition):
    """
    Inviscid (slip) wall: zero normal velocity.
    Mirrors the edge cell and reverses its momentum.
    """

    name = 'reflective'

    def apply(self, U: np.ndarray, side: str) -> np.ndarray:
        _check_side(side)

        if side == 'left':
            U[:, 0] = U[:, 1]
            U[MOMENTUM, 0] = -U[MOMENTUM, 1]  # Reflect momentum
        else:
            U[:, -1] = U[:, -2]
            U[MOMENTUM, -1] = -U[MOMENTUM, -2]  # Reflect momentum

        return U


class TransmissiveBC(BoundaryCondition):
    """
    Open (zero-gradient) boundary: the ghost cell copies the edge cell,
    letting waves leave the domain without reflection.
    """

    name = 'transmissive'

    def apply(self, U: np.ndarray, side: str) -> np.ndarray:
        _check_side(side)

        if side == 'left':
            U[:, 0] = U[:, 1]
        else:
            U[:, -1] = U[:, -2]

        return U


class PeriodicBC(BoundaryCondition):
    """
    Periodic boundary: the domain wraps around. Must be used on both sides.
    """

    name = 'periodic'

    def apply(self, U: np.ndarray, side: str) -> np.ndarray:
        _check_side(side)

        if side == 'left':
            U[:, 0] = U[:, -2]   # Last interior cell
        else:
            U[:, -1] = U[:, 1]   # First interior cell

        return U


BOUNDARIES = {
    ReflectiveWallBC.name: ReflectiveWallBC,
    TransmissiveBC.name: TransmissiveBC,
    PeriodicBC.name: PeriodicBC,
}


def make_boundary(name: str) -> BoundaryCondition:
    """Create a boundary condition by name."""
    try:
        return BOUNDARIES[name]()
    except KeyError:
        raise ValueError(f"Unknown boundary condition: {name}. "
                         f"Options: {', '.join(BOUNDARIES)}") from None


def check_boundary_pair(bc_left: BoundaryCondition, bc_right: BoundaryCondition):
    """Periodic boundaries only make sense in pairs."""
    if isinstance(bc_left, PeriodicBC) != isinstance(bc_right, PeriodicBC):
        raise ValueError("Periodic boundary must be applied on both sides")
