"""
Uniform 1D mesh.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class Mesh1D:
    """
    1D cell-centered finite volume mesh.

    - x_faces: Face locations (n_cells + 1)
    - x_cells: Cell centers (n_cells)
    - dx: Cell width (uniform)
    """
    x_faces: np.ndarray

    def __post_init__(self):
        self.x_faces = np.asarray(self.x_faces, dtype=float)
        self.n_cells = len(self.x_faces) - 1
        if self.n_cells < 1:
            raise ValueError("Mesh needs at least one cell")

        widths = self.x_faces[1:] - self.x_faces[:-1]
        if np.any(widths <= 0):
            raise ValueError("Mesh faces must be strictly increasing")
        if not np.allclose(widths, widths[0]):
            raise ValueError("Mesh must be uniform")

        self.dx = float(self.x_faces[-1] - self.x_faces[0]) / self.n_cells
        self.x_cells = 0.5 * (self.x_faces[:-1] + self.x_faces[1:])

    @property
    def x_min(self) -> float:
        return float(self.x_faces[0])

    @property
    def length(self) -> float:
        return float(self.x_faces[-1] - self.x_faces[0])

    def coordinates(self) -> np.ndarray:
        """Output coordinate of each cell, x = x_min + i * dx."""
        return self.x_min + np.arange(self.n_cells) * self.dx

    @classmethod
    def uniform(cls, x_min: float, x_max: float, n_cells: int) -> 'Mesh1D':
        """
        Create a uniform mesh.

        Args:
            x_min, x_max: Domain bounds
            n_cells: Number of cells
        """
        if n_cells < 1:
            raise ValueError(f"n_cells must be at least 1, got {n_cells}")
        return cls(x_faces=np.linspace(x_min, x_max, n_cells + 1))
