"""
Time-stepping driver for the 1D split-flux Euler solver.
"""

import logging
import numpy as np
import matplotlib.pyplot as plt
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .gas import GasProperties
from .state import FlowState
from .mesh import Mesh1D
from .container import StateContainer
from .eos import compute_extended, VELOCITY, SOUND_SPEED, PRESSURE, TEMPERATURE
from .flux import SPLITTINGS, FluxSplitting, make_splitting
from .boundary import BOUNDARIES, BoundaryCondition, make_boundary, check_boundary_pair
from .initial import INITIAL_CONDITIONS, make_initial_condition
from .update import conservative_update, cfl_number
from .dispatch import Dispatcher, make_dispatcher
from .errors import NonPhysicalStateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverConfig:
    """Configuration for the 1D split-flux solver."""
    n_cells: int = 1000
    steps: int = 100
    dt: float = 3.0e-4              # Fixed; must satisfy dt <= dx / max(|u| + c)
    length: float = 1.0
    gamma: float = 1.4
    R: float = 1.0
    initial_condition: str = 'sod'  # Options: 'sod', 'uniform'
    splitting: str = 'lax-friedrichs'  # Options: 'lax-friedrichs', 'shll'
    boundary: str = 'reflective'    # Options: 'reflective', 'transmissive', 'periodic'
    backend: str = 'vectorized'     # Options: 'vectorized', 'serial', 'threaded'
    n_jobs: int = -1
    max_work_group_size: int = 256
    print_interval: int = 10

    def __post_init__(self):
        if self.n_cells < 1:
            raise ValueError(f"n_cells must be at least 1, got {self.n_cells}")
        if self.steps < 0:
            raise ValueError(f"steps must be non-negative, got {self.steps}")
        if not self.dt > 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if not self.length > 0:
            raise ValueError(f"length must be positive, got {self.length}")
        if self.print_interval < 0:
            raise ValueError(f"print_interval must be non-negative, got {self.print_interval}")
        if self.initial_condition not in INITIAL_CONDITIONS:
            raise ValueError(f"Unknown initial condition: {self.initial_condition}")
        if self.splitting not in SPLITTINGS:
            raise ValueError(f"Unknown flux splitting: {self.splitting}")
        if self.boundary not in BOUNDARIES:
            raise ValueError(f"Unknown boundary condition: {self.boundary}")
        # Raises ValueError for invalid gas constants
        self.gas()

    @property
    def dx(self) -> float:
        return self.length / self.n_cells

    def gas(self) -> GasProperties:
        return GasProperties(gamma=self.gamma, R=self.R)


class SolverStatus(Enum):
    INITIALIZED = 'initialized'
    STEP_COMPLETE = 'step complete'
    FINISHED = 'finished'
    ABORTED = 'aborted'


class Solver1D:
    """
    Explicit first-order split-flux solver for the 1D Euler equations.

    Each step runs three data-parallel stages separated by full barriers:

    1. equation of state over every cell: U -> P
    2. flux splitting over every cell: (U, P) -> (F+, F-)
    3. conservative update of every interior cell from its own and its
       neighbours' split fluxes, written to the second U buffer

    The time step is fixed by the configuration; there is no CFL control.
    The run stops after exactly config.steps steps, or aborts on the first
    non-physical state.
    """

    def __init__(self, config: SolverConfig = None, initial_state: FlowState = None,
                 dispatcher: Dispatcher = None):
        """
        Initialize the solver.

        Args:
            config: Solver configuration
            initial_state: Initial flow state (default: config.initial_condition)
            dispatcher: Compute backend (default: config.backend)
        """
        self.config = config if config is not None else SolverConfig()
        self.gas = self.config.gas()
        self.mesh = Mesh1D.uniform(0.0, self.config.length, self.config.n_cells)
        self.dt = self.config.dt
        self.dt_dx = self.dt / self.mesh.dx

        # Numerical components
        self.splitting = make_splitting(self.config.splitting)
        self.set_boundary_conditions(make_boundary(self.config.boundary),
                                     make_boundary(self.config.boundary))

        if dispatcher is None:
            dispatcher = make_dispatcher(self.config.backend, n_jobs=self.config.n_jobs,
                                         max_work_group_size=self.config.max_work_group_size)
        self.dispatcher = dispatcher

        self.container = StateContainer(self.mesh)
        self._speed = None
        self.max_wave_speed = None

        if initial_state is None:
            initial_state = make_initial_condition(self.config.initial_condition, self.mesh, self.gas)
        self.set_initial_condition(initial_state)

    def set_initial_condition(self, state: FlowState):
        """Set the initial flow state and reset the run."""
        self.container.load(state)
        # Reject non-physical initial data before any step runs
        compute_extended(self.container.conserved(), self.gas)

        self.time = 0.0
        self.iteration = 0
        self.status = SolverStatus.INITIALIZED

    def set_boundary_conditions(self, bc_left: BoundaryCondition,
                                bc_right: BoundaryCondition):
        """Set boundary conditions."""
        check_boundary_pair(bc_left, bc_right)
        self.bc_left = bc_left
        self.bc_right = bc_right

    # --- Per-cell kernels (cells is a slice of work items) ---

    def _eos_kernel(self, cells: slice):
        c = self.container
        compute_extended(c.U[:, cells], self.gas, out=c.P[:, cells], offset=cells.start - 1)

    def _split_kernel(self, cells: slice):
        c = self.container
        F_plus, F_minus = self.splitting.split(c.U[:, cells], c.P[:, cells], self._speed)
        c.F_plus[:, cells] = F_plus
        c.F_minus[:, cells] = F_minus

    def _update_kernel(self, cells: slice):
        c = self.container
        conservative_update(c.U, c.F_plus, c.F_minus, self.dt_dx, c.U_next, cells)

    # --- Driver ---

    def step(self) -> float:
        """
        Perform one time step.

        Returns:
            dt: Time step taken

        Raises:
            NonPhysicalStateError: The equation of state rejected a cell;
                the solver is left ABORTED
        """
        if self.status in (SolverStatus.FINISHED, SolverStatus.ABORTED):
            raise RuntimeError(f"Cannot step a solver that is {self.status.value}")
        if self.iteration >= self.config.steps:
            raise RuntimeError(f"All {self.config.steps} steps have been taken")

        c = self.container

        # Ghost cells of the buffer about to be read
        self.bc_left.apply(c.U, 'left')
        self.bc_right.apply(c.U, 'right')

        with self._abort_on_non_physical():
            self.dispatcher.launch(self._eos_kernel, c.n_total)

        self._speed = self.splitting.wave_speed(c.P)
        if self._speed is not None:
            self.max_wave_speed = self._speed
        else:
            self.max_wave_speed = float(np.max(np.abs(c.P[VELOCITY]) + c.P[SOUND_SPEED]))
        self.dispatcher.launch(self._split_kernel, c.n_total)

        self.dispatcher.launch(self._update_kernel, self.mesh.n_cells)
        c.swap()

        self.time += self.dt
        self.iteration += 1

        if self.iteration >= self.config.steps:
            # No further EoS pass will read the last update
            with self._abort_on_non_physical():
                compute_extended(c.conserved(), self.gas, out=c.extended())
            self.status = SolverStatus.FINISHED
        else:
            self.status = SolverStatus.STEP_COMPLETE

        return self.dt

    @contextmanager
    def _abort_on_non_physical(self):
        """Mark the run ABORTED and re-raise if the equation of state rejects a cell."""
        try:
            yield
        except NonPhysicalStateError as err:
            self.status = SolverStatus.ABORTED
            err.at_step(self.iteration)
            logger.error("Aborting run: %s", err)
            raise

    def solve(self) -> Dict:
        """
        Run the configured number of steps.

        Returns:
            Dictionary with run summary

        Raises:
            RuntimeError: The run was already aborted
            NonPhysicalStateError: The run aborted during this call
        """
        if self.status == SolverStatus.ABORTED:
            raise RuntimeError("Cannot solve an aborted run; set a new initial condition first")

        logger.info("Starting 1D split-flux Euler solver")
        logger.info("Cells: %d, Steps: %d, dt: %.4e, dx: %.4e",
                    self.mesh.n_cells, self.config.steps, self.dt, self.mesh.dx)
        logger.info("Splitting: %s, Boundaries: %s/%s, Backend: %s",
                    self.splitting.name, self.bc_left.name, self.bc_right.name,
                    self.dispatcher.describe())

        if self.iteration >= self.config.steps:
            self.status = SolverStatus.FINISHED

        while self.status not in (SolverStatus.FINISHED, SolverStatus.ABORTED):
            self.step()

            interval = self.config.print_interval
            if interval and self.iteration % interval == 0:
                logger.info("Step %d of %d, t = %.4e, max |u|+c = %.4f, CFL = %.3f",
                            self.iteration, self.config.steps, self.time, self.max_wave_speed,
                            cfl_number(self.dt, self.mesh.dx, self.max_wave_speed))

        totals = self.totals()
        logger.info("Simulation complete: %d steps, t = %.4e", self.iteration, self.time)
        logger.info("Totals: mass = %.10e, momentum = %.10e, energy = %.10e", *totals)

        return {
            'iterations': self.iteration,
            'time': self.time,
            'max_wave_speed': self.max_wave_speed,
            'totals': totals,
        }

    # --- Results ---

    def get_state(self) -> FlowState:
        """Get current flow state (a copy of the interior cells)."""
        return FlowState.from_array(self.container.conserved().copy(), self.gas)

    def get_conserved(self) -> np.ndarray:
        """Current conserved state U of the interior cells, shape (3, n_cells)."""
        return self.container.conserved().copy()

    def get_extended_state(self) -> np.ndarray:
        """Extended state P = [rho, u, p, T, c] of the current U, shape (5, n_cells)."""
        c = self.container
        compute_extended(c.conserved(), self.gas, out=c.extended())
        return c.extended().copy()

    def totals(self) -> np.ndarray:
        """Domain integrals of mass, momentum and total energy."""
        return self.container.conserved().sum(axis=1) * self.mesh.dx

    def plot_solution(self, filename: str = None, show: bool = True):
        """Plot the current solution."""
        P = self.get_extended_state()
        x = self.mesh.x_cells

        fig, axes = plt.subplots(2, 2, figsize=(12, 8))
        fig.suptitle(f'1D Split-Flux Euler Solution (t = {self.time:.4e}, step = {self.iteration})')

        panels = [
            (P[0], 'Density', 'b-'),
            (P[VELOCITY], 'Velocity', 'r-'),
            (P[PRESSURE], 'Pressure', 'g-'),
            (P[TEMPERATURE], 'Temperature', 'm-'),
        ]
        for ax, (values, label, style) in zip(axes.flat, panels):
            ax.plot(x, values, style, linewidth=2)
            ax.set_xlabel('x')
            ax.set_ylabel(label)
            ax.set_title(label)
            ax.grid(True)

        plt.tight_layout()

        if filename:
            plt.savefig(filename, dpi=150, bbox_inches='tight')
            logger.info("Saved plot to %s", filename)

        if show:
            plt.show()

        return fig
