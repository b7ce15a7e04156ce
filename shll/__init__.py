"""
SHLL Package - 1D Split-Flux Euler Solver
=========================================

Re-exports all public components from shll.src
"""

from shll.src import (
    # Gas properties and state
    GasProperties,
    FlowState,
    Mesh1D,
    # Errors
    ShllError,
    DispatchError,
    NonPhysicalStateError,
    # Numerical pipeline
    compute_extended,
    FluxSplitting,
    LaxFriedrichsSplitting,
    SHLLSplitting,
    physical_flux,
    conservative_update,
    # Boundary conditions
    BoundaryCondition,
    ReflectiveWallBC,
    TransmissiveBC,
    PeriodicBC,
    # Initial conditions
    sod_shock_tube,
    uniform_flow,
    # Storage and dispatch
    StateContainer,
    Dispatcher,
    VectorizedDispatcher,
    SerialDispatcher,
    ThreadedDispatcher,
    # Solver
    Solver1D,
    SolverConfig,
    SolverStatus,
    # Validation
    exact_riemann_solution,
)

__all__ = [
    'GasProperties',
    'FlowState',
    'Mesh1D',
    'ShllError',
    'DispatchError',
    'NonPhysicalStateError',
    'compute_extended',
    'FluxSplitting',
    'LaxFriedrichsSplitting',
    'SHLLSplitting',
    'physical_flux',
    'conservative_update',
    'BoundaryCondition',
    'ReflectiveWallBC',
    'TransmissiveBC',
    'PeriodicBC',
    'sod_shock_tube',
    'uniform_flow',
    'StateContainer',
    'Dispatcher',
    'VectorizedDispatcher',
    'SerialDispatcher',
    'ThreadedDispatcher',
    'Solver1D',
    'SolverConfig',
    'SolverStatus',
    'exact_riemann_solution',
]
