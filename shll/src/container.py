"""
Per-run storage for the split-flux pipeline.

Every buffer is ghost padded: column 0 and column n_cells + 1 are ghost
cells, interior cell i lives in column i + 1.

The conserved state is double buffered. Each step reads the current
buffer and writes the other one, then the roles are swapped, so the
update never reads a value it has already overwritten.
"""

import numpy as np

from .mesh import Mesh1D
from .state import FlowState, N_CONSERVED
from .eos import N_EXTENDED


class StateContainer:
    """Buffers U (x2), P, F+ and F- for one mesh."""

    def __init__(self, mesh: Mesh1D):
        self.mesh = mesh
        self.n_total = mesh.n_cells + 2

        self._U = (np.zeros((N_CONSERVED, self.n_total)),
                   np.zeros((N_CONSERVED, self.n_total)))
        self.P = np.zeros((N_EXTENDED, self.n_total))
        self.F_plus = np.zeros((N_CONSERVED, self.n_total))
        self.F_minus = np.zeros((N_CONSERVED, self.n_total))
        self.parity = 0

    @property
    def U(self) -> np.ndarray:
        """Conserved state read by the current step."""
        return self._U[self.parity]

    @property
    def U_next(self) -> np.ndarray:
        """Conserved state written by the current step."""
        return self._U[1 - self.parity]

    def swap(self):
        """Make the freshly written buffer the current one."""
        self.parity = 1 - self.parity

    def load(self, state: FlowState):
        """Copy an initial state into the interior of the current buffer."""
        U = state.to_array()
        if U.shape[1] != self.mesh.n_cells:
            raise ValueError(f"Initial state has {U.shape[1]} cells, "
                             f"mesh has {self.mesh.n_cells}")
        self.parity = 0
        for buffer in self._U:
            buffer.fill(0.0)
        self.U[:, 1:-1] = U

    def conserved(self) -> np.ndarray:
        """Interior view of the current conserved state, shape (3, n_cells)."""
        return self.U[:, 1:-1]

    def extended(self) -> np.ndarray:
        """Interior view of the extended state buffer, shape (5, n_cells)."""
        return self.P[:, 1:-1]
