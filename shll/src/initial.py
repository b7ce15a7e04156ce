"""
Analytic initial conditions.

Sod's shock tube (Sod, 1978) is a Riemann problem with a dense gas on the
left and a light gas on the right, both at rest and at the same
temperature. The solution consists of:
1. Left state (undisturbed)
2. Rarefaction fan
3. Contact discontinuity
4. Shock wave
5. Right state (undisturbed)
"""

import numpy as np

from .gas import GasProperties
from .mesh import Mesh1D
from .state import FlowState


def sod_shock_tube(mesh: Mesh1D, gas: GasProperties, rho_left: float = 10.0,
                   rho_right: float = 1.0, temperature: float = 1.0,
                   x_diaphragm: float = None) -> FlowState:
    """
    Sod shock tube with a density jump at uniform temperature.

    Args:
        mesh: Computational mesh
        gas: Gas properties
        rho_left, rho_right: Densities either side of the diaphragm
        temperature: Temperature of both gases
        x_diaphragm: Diaphragm position (default: middle of the domain)
    """
    if x_diaphragm is None:
        x_diaphragm = mesh.x_min + 0.5 * mesh.length

    rho = np.where(mesh.x_cells < x_diaphragm, rho_left, rho_right)
    u = np.zeros(mesh.n_cells)
    T = np.full(mesh.n_cells, temperature)

    return FlowState.from_temperature(rho=rho, u=u, T=T, gas=gas)


def uniform_flow(mesh: Mesh1D, gas: GasProperties, rho: float = 1.0,
                 u: float = 0.5, temperature: float = 1.0) -> FlowState:
    """Spatially uniform flow (every cell identical)."""
    return FlowState.from_temperature(
        rho=np.full(mesh.n_cells, rho),
        u=np.full(mesh.n_cells, u),
        T=np.full(mesh.n_cells, temperature),
        gas=gas
    )


INITIAL_CONDITIONS = {
    'sod': sod_shock_tube,
    'uniform': uniform_flow,
}


def make_initial_condition(name: str, mesh: Mesh1D, gas: GasProperties) -> FlowState:
    """Evaluate a registered initial condition with its default parameters."""
    try:
        initial_condition = INITIAL_CONDITIONS[name]
    except KeyError:
        raise ValueError(f"Unknown initial condition: {name}. "
                         f"Options: {', '.join(INITIAL_CONDITIONS)}") from None
    return initial_condition(mesh, gas)
