"""
Ideal-gas equation of state: conserved state U -> extended state P.

The extended state holds everything the flux splitting needs:

    P = [rho, u, p, T, c]

    u = rhoU / rho
    p = (gamma - 1) * (rhoE - 0.5 * rho * u²)
    T = p / (rho * R)
    c = sqrt(gamma * p / rho)

The conversion is pure and cell-local. It accepts a single cell (shape (3,))
or a block of cells (shape (3, n)); no neighbour is ever read, so blocks can
be processed in any order or concurrently.
"""

import numpy as np

from .gas import GasProperties
from .errors import NonPhysicalStateError
from .state import DENSITY, MOMENTUM, ENERGY

# Row indices of the extended state vector P
VELOCITY = 1
PRESSURE = 2
TEMPERATURE = 3
SOUND_SPEED = 4
N_EXTENDED = 5

_CONSERVED_NAMES = ('density', 'momentum', 'energy')


def _reject(bad: np.ndarray, values: np.ndarray, quantity: str, offset: int):
    """Raise for the first flagged cell of a block."""
    bad = np.atleast_1d(bad)
    if bad.any():
        i = int(np.argmax(bad))
        raise NonPhysicalStateError(cell=offset + i, quantity=quantity,
                                    value=float(np.atleast_1d(values)[i]))


def compute_extended(U: np.ndarray, gas: GasProperties, out: np.ndarray = None,
                     offset: int = 0) -> np.ndarray:
    """
    Compute the extended state of one cell or a block of cells.

    Args:
        U: Conserved variables, shape (3,) or (3, n)
        gas: Gas properties
        out: Optional output array, shape (5,) or (5, n)
        offset: Cell index of the first column of U (for error reports)

    Returns:
        P: Extended state [rho, u, p, T, c]

    Raises:
        NonPhysicalStateError: density or pressure not strictly positive,
            or a conserved component not finite
    """
    for k, name in enumerate(_CONSERVED_NAMES):
        _reject(~np.isfinite(U[k]), U[k], name, offset)

    rho = U[DENSITY]
    _reject(rho <= 0.0, rho, 'density', offset)

    u = U[MOMENTUM] / rho
    p = (gas.gamma - 1) * (U[ENERGY] - 0.5 * rho * u**2)
    _reject(p <= 0.0, p, 'pressure', offset)

    if out is None:
        out = np.empty((N_EXTENDED,) + np.shape(rho))

    out[DENSITY] = rho
    out[VELOCITY] = u
    out[PRESSURE] = p
    out[TEMPERATURE] = p / (rho * gas.R)
    out[SOUND_SPEED] = np.sqrt(gas.gamma * p / rho)
    return out
