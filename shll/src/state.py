"""
Flow state representation using conservative variables.

State is defined by:
    rho   - density
    rhoU  - momentum per volume
    rhoE  - total energy per volume

Arrays are variable-major: row k holds component k for every cell.
"""

import numpy as np
from dataclasses import dataclass

from .gas import GasProperties

# Row indices of the conserved state vector U
DENSITY = 0
MOMENTUM = 1
ENERGY = 2
N_CONSERVED = 3


@dataclass
class FlowState:
    """
    Represents the flow state at a point or cell using conservative variables.

    Conservative variables (stored directly):
        rho  : Density
        rhoU : Momentum per volume
        rhoE : Total energy per volume

    Primitive variables (computed as properties):
        u, p, T, a, M, H, e
    """
    rho: np.ndarray     # Density
    rhoU: np.ndarray    # Momentum per volume
    rhoE: np.ndarray    # Total energy per volume
    gas: GasProperties

    # --- Primitive variables as properties ---

    @property
    def u(self) -> np.ndarray:
        """Velocity."""
        return self.rhoU / self.rho

    @property
    def p(self) -> np.ndarray:
        """Pressure from total energy."""
        # p = (gamma - 1) * (rhoE - 0.5 * rho * u²)
        return (self.gas.gamma - 1) * (self.rhoE - 0.5 * self.rhoU**2 / self.rho)

    @property
    def T(self) -> np.ndarray:
        """Temperature from ideal gas law."""
        return self.p / (self.rho * self.gas.R)

    @property
    def e(self) -> np.ndarray:
        """Specific internal energy."""
        return self.p / (self.rho * (self.gas.gamma - 1))

    @property
    def E(self) -> np.ndarray:
        """Total specific energy."""
        return self.rhoE / self.rho

    @property
    def H(self) -> np.ndarray:
        """Total specific enthalpy."""
        return self.E + self.p / self.rho

    @property
    def a(self) -> np.ndarray:
        """Speed of sound."""
        return np.sqrt(self.gas.gamma * self.p / self.rho)

    @property
    def M(self) -> np.ndarray:
        """Mach number."""
        return self.u / self.a

    # --- Array conversion methods ---

    def to_array(self) -> np.ndarray:
        """
        Convert to conservative variable array.

        Returns:
            U: Array of shape (3, n_cells) [rho, rhoU, rhoE]
        """
        U = np.zeros((N_CONSERVED, len(self.rho)))
        U[DENSITY] = self.rho
        U[MOMENTUM] = self.rhoU
        U[ENERGY] = self.rhoE
        return U

    @classmethod
    def from_array(cls, U: np.ndarray, gas: GasProperties) -> 'FlowState':
        """
        Create FlowState from conservative variable array.

        Args:
            U: Conservative variables [rho, rhoU, rhoE], shape (3, n_cells)
            gas: Gas properties
        """
        return cls(rho=U[DENSITY], rhoU=U[MOMENTUM], rhoE=U[ENERGY], gas=gas)

    @classmethod
    def from_primitives(cls, rho: np.ndarray, u: np.ndarray, p: np.ndarray,
                        gas: GasProperties) -> 'FlowState':
        """
        Create FlowState from density, velocity and pressure.
        """
        rho = np.asarray(rho, dtype=float)
        u = np.asarray(u, dtype=float)
        p = np.asarray(p, dtype=float)

        rhoU = rho * u
        # rhoE = p / (gamma - 1) + 0.5 * rho * u²
        rhoE = p / (gas.gamma - 1) + 0.5 * rho * u**2
        return cls(rho=rho, rhoU=rhoU, rhoE=rhoE, gas=gas)

    @classmethod
    def from_temperature(cls, rho: np.ndarray, u: np.ndarray, T: np.ndarray,
                         gas: GasProperties) -> 'FlowState':
        """
        Create FlowState from density, velocity and temperature.

        Total energy is rho * (cv * T + 0.5 * u²).
        """
        rho = np.asarray(rho, dtype=float)
        u = np.asarray(u, dtype=float)
        T = np.asarray(T, dtype=float)

        rhoU = rho * u
        rhoE = rho * (gas.cv * T + 0.5 * u**2)
        return cls(rho=rho, rhoU=rhoU, rhoE=rhoE, gas=gas)
