"""
1D Split-Flux Euler Solver Package
==================================

An explicit, first-order finite volume solver for the 1D compressible
Euler equations using flux-vector splitting on a uniform grid.

Features:
- Ideal-gas equation of state with non-physical state detection
- Global Lax-Friedrichs and split-HLL (SHLL) flux splitting
- Reflective, transmissive and periodic boundaries
- Fixed time step, double-buffered conserved state
- Vectorized, serial and threaded per-cell dispatch

Each step runs three stages separated by barriers:
    U --(equation of state)--> P --(flux splitting)--> F+, F-
      --(conservative update)--> U_next

State representation (conservative variables):
    rho   - density
    rhoU  - momentum per volume
    rhoE  - total energy per volume

Example:
    config = SolverConfig(n_cells=1000, steps=100, dt=3e-4)
    solver = Solver1D(config)
    solver.solve()
    state = solver.get_state()
    print(state.u, state.p, state.T)
"""

from .gas import GasProperties
from .state import FlowState
from .mesh import Mesh1D
from .errors import ShllError, DispatchError, NonPhysicalStateError
from .eos import compute_extended
from .flux import FluxSplitting, LaxFriedrichsSplitting, SHLLSplitting, physical_flux
from .update import conservative_update
from .boundary import BoundaryCondition, ReflectiveWallBC, TransmissiveBC, PeriodicBC
from .initial import sod_shock_tube, uniform_flow
from .container import StateContainer
from .dispatch import Dispatcher, VectorizedDispatcher, SerialDispatcher, ThreadedDispatcher
from .solver import Solver1D, SolverConfig, SolverStatus
from .reference import exact_riemann_solution

__all__ = [
    # Gas properties and state
    'GasProperties',
    'FlowState',
    'Mesh1D',

    # Errors
    'ShllError',
    'DispatchError',
    'NonPhysicalStateError',

    # Numerical pipeline
    'compute_extended',
    'FluxSplitting',
    'LaxFriedrichsSplitting',
    'SHLLSplitting',
    'physical_flux',
    'conservative_update',

    # Boundary conditions
    'BoundaryCondition',
    'ReflectiveWallBC',
    'TransmissiveBC',
    'PeriodicBC',

    # Initial conditions
    'sod_shock_tube',
    'uniform_flow',

    # Storage and dispatch
    'StateContainer',
    'Dispatcher',
    'VectorizedDispatcher',
    'SerialDispatcher',
    'ThreadedDispatcher',

    # Solver
    'Solver1D',
    'SolverConfig',
    'SolverStatus',

    # Validation
    'exact_riemann_solution',
]

__version__ = '1.0.0'
