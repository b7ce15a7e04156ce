"""
Explicit conservative update from split fluxes.

For interior cell i (column j = i + 1 of the ghost-padded buffers):

    U_new[j] = U[j] - dt/dx * ((F+[j] - F+[j-1]) + (F-[j+1] - F-[j]))

which is the flux difference of the interface fluxes
F_{j+1/2} = F+[j] + F-[j+1] and F_{j-1/2} = F+[j-1] + F-[j].
"""

import numpy as np


def update_cell(U_i: np.ndarray, Fp_left: np.ndarray, Fp_i: np.ndarray,
                Fm_i: np.ndarray, Fm_right: np.ndarray, dt_dx: float) -> np.ndarray:
    """
    Advance one cell (or an aligned block of cells) by one step.

    Args:
        U_i: Conserved state of the cell
        Fp_left: F+ of the left neighbour
        Fp_i, Fm_i: F+ and F- of the cell itself
        Fm_right: F- of the right neighbour
        dt_dx: Time step over cell width

    Returns:
        New conserved state of the cell
    """
    return U_i - dt_dx * ((Fp_i - Fp_left) + (Fm_right - Fm_i))


def conservative_update(U: np.ndarray, F_plus: np.ndarray, F_minus: np.ndarray,
                        dt_dx: float, out: np.ndarray, cells: slice = None) -> np.ndarray:
    """
    Update a range of interior cells.

    All arrays are ghost padded, shape (3, n_cells + 2). Ghost columns of
    F+ and F- must already hold the boundary fluxes.

    Args:
        U: Conserved state at the start of the step (read only)
        F_plus, F_minus: Split fluxes of every column (read only)
        dt_dx: Time step over cell width
        out: Destination buffer; must not overlap U, F_plus or F_minus
        cells: Interior cell indices to update (default: all)

    Returns:
        out
    """
    for name, source in (('U', U), ('F_plus', F_plus), ('F_minus', F_minus)):
        if np.may_share_memory(out, source):
            raise ValueError(f"update output buffer overlaps {name}; "
                             "the update must write to a separate buffer")

    if cells is None:
        cells = slice(0, U.shape[1] - 2)

    lo = cells.start + 1
    hi = cells.stop + 1
    out[:, lo:hi] = update_cell(U[:, lo:hi],
                                F_plus[:, lo - 1:hi - 1], F_plus[:, lo:hi],
                                F_minus[:, lo:hi], F_minus[:, lo + 1:hi + 1],
                                dt_dx)
    return out


def cfl_number(dt: float, dx: float, speed: float) -> float:
    """Courant number speed * dt / dx. Diagnostic only; never enforced."""
    return speed * dt / dx
