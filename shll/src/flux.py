"""
Flux-vector splitting schemes for the 1D Euler equations.

Each cell's physical flux F(U) is split into a right-going part F+ and a
left-going part F- with F+ + F- = F(U). The interface flux between cells
i and i+1 is then F+[i] + F-[i+1].
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .state import DENSITY, MOMENTUM, ENERGY
from .eos import VELOCITY, PRESSURE, SOUND_SPEED


def physical_flux(U: np.ndarray, P: np.ndarray) -> np.ndarray:
    """
    Euler flux F = [rho u, rho u² + p, u (rhoE + p)].

    Args:
        U: Conserved variables, shape (3,) or (3, n)
        P: Extended state of the same cells

    Returns:
        F: Physical flux, same shape as U
    """
    u = P[VELOCITY]
    p = P[PRESSURE]

    F = np.empty_like(U)
    F[DENSITY] = U[MOMENTUM]
    F[MOMENTUM] = U[MOMENTUM] * u + p
    F[ENERGY] = u * (U[ENERGY] + p)
    return F


class FluxSplitting(ABC):
    """Abstract base class for flux-vector splitting schemes."""

    name = ''

    def wave_speed(self, P: np.ndarray) -> Optional[float]:
        """
        Grid-wide wave speed bound, or None if the scheme only uses local speeds.

        Evaluated once per step over every cell (ghosts included), after the
        extended state of the whole grid is available.
        """
        return None

    @abstractmethod
    def split(self, U: np.ndarray, P: np.ndarray,
              speed: Optional[float]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Split the flux of one cell or a block of cells.

        Args:
            U: Conserved variables, shape (3,) or (3, n)
            P: Extended state of the same cells
            speed: Value returned by wave_speed() for the current step

        Returns:
            (F_plus, F_minus), each the same shape as U
        """
        pass


class LaxFriedrichsSplitting(FluxSplitting):
    """
    Global Lax-Friedrichs splitting.

        F± = 0.5 * (F(U) ± a U),   a = max over the grid of |u| + c

    One scalar a is shared by every cell of a step, so neighbouring cells
    never disagree on the speed bound. Very robust and very diffusive.
    """

    name = 'lax-friedrichs'

    def wave_speed(self, P: np.ndarray) -> float:
        return float(np.max(np.abs(P[VELOCITY]) + P[SOUND_SPEED]))

    def split(self, U: np.ndarray, P: np.ndarray,
              speed: Optional[float]) -> Tuple[np.ndarray, np.ndarray]:
        if speed is None:
            raise ValueError("Lax-Friedrichs splitting requires the global wave speed")

        F = physical_flux(U, P)
        F_plus = 0.5 * (F + speed * U)
        F_minus = 0.5 * (F - speed * U)
        return F_plus, F_minus


class SHLLSplitting(FluxSplitting):
    """
    Split HLL (SHLL) flux.

    The HLL flux with the cell's own wave speeds u - c and u + c, split
    into the parts contributed by the cell. With M = u / c clipped to
    [-1, 1]:

        F+ = 0.5 (1 + M) F + 0.5 c (1 - M²) U
        F- = 0.5 (1 - M) F - 0.5 c (1 - M²) U

    Supersonic cells send their whole flux downstream (M >= 1 gives
    F+ = F, F- = 0). Only local speeds are used.
    """

    name = 'shll'

    def split(self, U: np.ndarray, P: np.ndarray,
              speed: Optional[float]) -> Tuple[np.ndarray, np.ndarray]:
        c = P[SOUND_SPEED]
        M = np.clip(P[VELOCITY] / c, -1.0, 1.0)

        F = physical_flux(U, P)
        diffusion = 0.5 * c * (1 - M**2) * U
        F_plus = 0.5 * (1 + M) * F + diffusion
        F_minus = 0.5 * (1 - M) * F - diffusion
        return F_plus, F_minus


SPLITTINGS = {
    LaxFriedrichsSplitting.name: LaxFriedrichsSplitting,
    SHLLSplitting.name: SHLLSplitting,
}


def make_splitting(name: str) -> FluxSplitting:
    """Create a splitting scheme by name."""
    try:
        return SPLITTINGS[name]()
    except KeyError:
        raise ValueError(f"Unknown flux splitting: {name}. "
                         f"Options: {', '.join(SPLITTINGS)}") from None
