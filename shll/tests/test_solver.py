"""
Pytest tests for the time-stepping driver.

Tests verify:
1. Configuration validation
2. Run state machine: exact step count, no stepping after the end
3. Uniform flow is preserved exactly by open and periodic boundaries
4. Conservation of mass and energy (and momentum where no wall acts)
5. Mirror symmetry of the scheme
6. Stability violations abort the run with the failing cell and step
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from shll.src import (
    GasProperties, FlowState, Solver1D, SolverConfig, SolverStatus,
    NonPhysicalStateError, DispatchError, PeriodicBC, TransmissiveBC,
    sod_shock_tube
)


@pytest.fixture
def gas():
    """Non-dimensional diatomic gas (R = 1)."""
    return GasProperties(gamma=1.4, R=1.0)


@pytest.fixture
def uniform_config():
    """Uniform flow rho = 1, u = 0.5, T = 1 on 1000 cells."""
    return SolverConfig(n_cells=1000, steps=100, dt=3e-4, initial_condition='uniform',
                        print_interval=0)


@pytest.fixture
def sod_config():
    """Shock tube with reflective walls."""
    return SolverConfig(n_cells=1000, steps=100, dt=3e-4, initial_condition='sod',
                        boundary='reflective', print_interval=0)


def create_sod_solver(config, rho_left=10.0, rho_right=1.0):
    """Solver for a shock tube with the given densities."""
    solver = Solver1D(config)
    solver.set_initial_condition(sod_shock_tube(solver.mesh, solver.gas,
                                                rho_left=rho_left, rho_right=rho_right))
    return solver


class TestConfiguration:
    """Tests for SolverConfig."""

    def test_defaults(self):
        """Defaults reproduce the reference run."""
        config = SolverConfig()
        assert config.n_cells == 1000
        assert config.steps == 100
        assert config.dt == pytest.approx(3e-4)
        assert config.dx == pytest.approx(1e-3)
        assert config.gas().cv == pytest.approx(2.5)

    @pytest.mark.parametrize("kwargs", [
        dict(n_cells=0),
        dict(steps=-1),
        dict(dt=0.0),
        dict(dt=-1e-4),
        dict(length=0.0),
        dict(gamma=1.0),
        dict(R=0.0),
        dict(splitting='roe'),
        dict(boundary='inflow'),
        dict(initial_condition='blast'),
    ])
    def test_invalid(self, kwargs):
        """Invalid settings are rejected up front."""
        with pytest.raises(ValueError):
            SolverConfig(**kwargs)

    def test_unknown_backend(self):
        """Unknown backends are rejected when the solver is built."""
        with pytest.raises(DispatchError):
            Solver1D(SolverConfig(n_cells=10, backend='gpu'))

    def test_immutable(self):
        """Configurations cannot change after construction."""
        config = SolverConfig()
        with pytest.raises(AttributeError):
            config.dt = 1.0

    def test_wrong_initial_size(self, gas):
        """The initial state must match the mesh."""
        solver = Solver1D(SolverConfig(n_cells=10))
        state = FlowState.from_primitives(np.ones(5), np.zeros(5), np.ones(5), gas)
        with pytest.raises(ValueError):
            solver.set_initial_condition(state)

    def test_non_physical_initial_state(self, gas):
        """Invalid initial data are rejected before any step."""
        solver = Solver1D(SolverConfig(n_cells=4))
        state = FlowState.from_primitives([1.0, 1.0, -1.0, 1.0], np.zeros(4), np.ones(4), gas)
        with pytest.raises(NonPhysicalStateError) as excinfo:
            solver.set_initial_condition(state)
        assert excinfo.value.cell == 2

    def test_single_periodic_side(self):
        """Periodic boundaries must be set on both sides."""
        solver = Solver1D(SolverConfig(n_cells=10))
        with pytest.raises(ValueError):
            solver.set_boundary_conditions(PeriodicBC(), TransmissiveBC())


class TestRunState:
    """Tests for the run state machine."""

    def test_exact_step_count(self, sod_config):
        """The run takes exactly the configured number of steps."""
        solver = Solver1D(sod_config)
        assert solver.status == SolverStatus.INITIALIZED

        result = solver.solve()

        assert result['iterations'] == 100
        assert solver.iteration == 100
        assert solver.time == pytest.approx(0.03)
        assert solver.status == SolverStatus.FINISHED

    def test_step_by_step(self):
        """Single steps move through STEP_COMPLETE to FINISHED."""
        solver = Solver1D(SolverConfig(n_cells=50, steps=2, dt=1e-3, print_interval=0))

        assert solver.step() == pytest.approx(1e-3)
        assert solver.status == SolverStatus.STEP_COMPLETE
        solver.step()
        assert solver.status == SolverStatus.FINISHED

        with pytest.raises(RuntimeError):
            solver.step()

    def test_zero_steps(self):
        """A zero-step run returns the initial state."""
        config = SolverConfig(n_cells=100, steps=0, print_interval=0)
        solver = Solver1D(config)
        initial = solver.get_conserved()

        result = solver.solve()

        assert result['iterations'] == 0
        np.testing.assert_array_equal(solver.get_conserved(), initial)

    def test_no_step_past_configured_count(self):
        """A zero-step run cannot be advanced by stepping directly."""
        solver = Solver1D(SolverConfig(n_cells=100, steps=0, print_interval=0))
        initial = solver.get_conserved()

        with pytest.raises(RuntimeError):
            solver.step()

        assert solver.iteration == 0
        assert solver.time == 0.0
        np.testing.assert_array_equal(solver.get_conserved(), initial)

    def test_max_wave_speed_is_splitting_speed(self):
        """With Lax-Friedrichs the reported wave speed is the splitting's global speed."""
        solver = Solver1D(SolverConfig(n_cells=100, steps=2, dt=1e-3, print_interval=0))
        solver.step()

        assert solver.max_wave_speed == solver._speed
        P = solver.container.P
        assert solver.max_wave_speed == pytest.approx(np.max(np.abs(P[1]) + P[4]))

    def test_results_are_copies(self):
        """Returned arrays do not alias the solver buffers."""
        solver = Solver1D(SolverConfig(n_cells=20, steps=1, print_interval=0))
        U = solver.get_conserved()
        U[:] = -1.0
        assert np.all(solver.get_conserved()[0] > 0)

    def test_reinitialise(self):
        """Setting a new initial condition resets the run."""
        solver = Solver1D(SolverConfig(n_cells=100, steps=5, dt=1e-3, print_interval=0))
        solver.solve()
        first = solver.get_conserved()

        solver.set_initial_condition(sod_shock_tube(solver.mesh, solver.gas))
        assert solver.status == SolverStatus.INITIALIZED
        assert solver.iteration == 0

        solver.solve()
        np.testing.assert_array_equal(solver.get_conserved(), first)

    def test_progress_logged(self, caplog):
        """Progress and totals are logged."""
        config = SolverConfig(n_cells=50, steps=4, dt=1e-3, print_interval=2)
        with caplog.at_level('INFO', logger='shll'):
            Solver1D(config).solve()

        assert "Step 2 of 4" in caplog.text
        assert "Step 4 of 4" in caplog.text
        assert "Totals: mass" in caplog.text


class TestUniformFlow:
    """Uniform flow rho = 1, u = 0.5, T = 1."""

    @pytest.mark.parametrize("boundary", ['transmissive', 'periodic'])
    @pytest.mark.parametrize("splitting", ['lax-friedrichs', 'shll'])
    def test_preserved_exactly(self, uniform_config, boundary, splitting):
        """Without walls a uniform state never changes."""
        config = SolverConfig(n_cells=uniform_config.n_cells, steps=uniform_config.steps,
                              dt=uniform_config.dt, initial_condition='uniform',
                              boundary=boundary, splitting=splitting, print_interval=0)
        solver = Solver1D(config)
        initial = solver.get_conserved()

        solver.solve()

        np.testing.assert_array_equal(solver.get_conserved(), initial)

    def test_single_step_fixed_point(self):
        """One step on 1000 uniform cells reproduces the extended state exactly."""
        config = SolverConfig(n_cells=1000, steps=1, dt=3e-4, initial_condition='uniform',
                              boundary='periodic', print_interval=0)
        solver = Solver1D(config)
        before = solver.get_extended_state()

        solver.solve()

        np.testing.assert_array_equal(solver.get_extended_state(), before)
        np.testing.assert_allclose(before[1], 0.5)
        np.testing.assert_allclose(before[3], 1.0)

    def test_initial_values(self, uniform_config):
        """rhoE = rho (cv T + u²/2) = 2.625."""
        solver = Solver1D(uniform_config)
        U = solver.get_conserved()

        np.testing.assert_allclose(U[0], 1.0)
        np.testing.assert_allclose(U[1], 0.5)
        np.testing.assert_allclose(U[2], 2.625)

    def test_reflective_walls_stay_physical(self, uniform_config):
        """Flow into the right wall compresses the gas without failure."""
        solver = Solver1D(uniform_config)
        solver.solve()
        state = solver.get_state()

        assert np.all(state.rho > 0)
        assert np.all(state.p > 0)
        assert state.rho[-1] > 1.0, "Gas should pile up against the right wall"
        assert state.rho[0] < 1.0, "Gas should expand away from the left wall"


class TestConservation:
    """Tests for conservation of the domain totals."""

    def test_reflective_mass_and_energy(self, sod_config):
        """Walls conserve mass and energy to rounding."""
        solver = Solver1D(sod_config)
        initial = solver.totals()
        solver.solve()
        final = solver.totals()

        for k, name in [(0, 'mass'), (2, 'energy')]:
            error = abs(final[k] - initial[k]) / initial[k]
            assert error < 1e-12, f"{name} not conserved, error = {error:.2e}"

    def test_reflective_momentum_wall_force(self, sod_config):
        """Momentum changes only by the wall pressure force (p_left - p_right) t."""
        solver = Solver1D(sod_config)
        assert solver.totals()[1] == 0.0

        solver.solve()

        # Waves have not reached the walls, so the wall pressures are 10 and 1
        expected = (10.0 - 1.0) * solver.time
        assert solver.totals()[1] == pytest.approx(expected, rel=1e-9)

    @pytest.mark.parametrize("splitting", ['lax-friedrichs', 'shll'])
    def test_periodic_all_components(self, splitting):
        """A periodic domain conserves every component."""
        config = SolverConfig(n_cells=200, steps=100, dt=1e-3, boundary='periodic',
                              splitting=splitting, print_interval=0)
        solver = Solver1D(config)
        initial = solver.totals()
        solver.solve()
        final = solver.totals()

        np.testing.assert_allclose(final[[0, 2]], initial[[0, 2]], rtol=1e-12)
        assert abs(final[1] - initial[1]) < 1e-12, "Momentum not conserved"

    def test_positivity(self, sod_config):
        """Density, pressure and temperature stay positive."""
        solver = Solver1D(sod_config)
        solver.solve()
        state = solver.get_state()

        assert np.all(state.rho > 0), f"Negative density, min = {np.min(state.rho)}"
        assert np.all(state.p > 0), f"Negative pressure, min = {np.min(state.p)}"
        assert np.all(state.T > 0), f"Negative temperature, min = {np.min(state.T)}"


class TestSymmetry:
    """The scheme has no preferred direction."""

    @pytest.mark.parametrize("splitting", ['lax-friedrichs', 'shll'])
    def test_mirror_image(self, splitting):
        """A mirrored shock tube gives the mirrored solution."""
        config = SolverConfig(n_cells=200, steps=50, dt=1.5e-3, splitting=splitting,
                              print_interval=0)
        forward = create_sod_solver(config, 10.0, 1.0)
        mirrored = create_sod_solver(config, 1.0, 10.0)
        forward.solve()
        mirrored.solve()

        U = forward.get_conserved()
        V = mirrored.get_conserved()[:, ::-1]

        np.testing.assert_allclose(V[0], U[0], rtol=1e-10)
        np.testing.assert_allclose(V[1], -U[1], rtol=1e-10, atol=1e-12)
        np.testing.assert_allclose(V[2], U[2], rtol=1e-10)


class TestStabilityViolation:
    """A time step far above the stability limit."""

    def test_abort_reports_cell_and_step(self):
        """dt = 0.01 drives the density negative in the first step."""
        config = SolverConfig(n_cells=1000, steps=100, dt=0.01, print_interval=0)
        solver = Solver1D(config)

        with pytest.raises(NonPhysicalStateError) as excinfo:
            solver.solve()

        err = excinfo.value
        assert err.step == 1, f"Expected failure detected at step 1, got {err.step}"
        assert err.quantity == 'density'
        assert err.cell == 499, f"Expected the cell left of the diaphragm, got {err.cell}"
        assert solver.status == SolverStatus.ABORTED

    def test_no_step_after_abort(self):
        """An aborted run cannot continue."""
        solver = Solver1D(SolverConfig(n_cells=1000, steps=100, dt=0.01, print_interval=0))
        with pytest.raises(NonPhysicalStateError):
            solver.solve()
        with pytest.raises(RuntimeError):
            solver.step()

    def test_abort_on_final_step(self):
        """A non-physical state produced by the last step still aborts the run."""
        config = SolverConfig(n_cells=1000, steps=1, dt=0.01, print_interval=0)
        solver = Solver1D(config)

        with pytest.raises(NonPhysicalStateError) as excinfo:
            solver.solve()

        err = excinfo.value
        assert err.step == 1, f"Expected failure detected at step 1, got {err.step}"
        assert err.quantity == 'density'
        assert err.cell == 499
        assert solver.status == SolverStatus.ABORTED

    def test_no_solve_after_abort(self):
        """Solving again after an abort is an error, not a silent summary."""
        solver = Solver1D(SolverConfig(n_cells=1000, steps=100, dt=0.01, print_interval=0))
        with pytest.raises(NonPhysicalStateError):
            solver.solve()
        with pytest.raises(RuntimeError):
            solver.solve()

    def test_abort_logged(self, caplog):
        """The failing cell is logged as an error."""
        solver = Solver1D(SolverConfig(n_cells=1000, steps=100, dt=0.01, print_interval=0))
        with caplog.at_level('ERROR', logger='shll'):
            with pytest.raises(NonPhysicalStateError):
                solver.solve()
        assert "cell 499 at step 1" in caplog.text


class TestResults:
    """Tests for result accessors."""

    def test_extended_state(self, sod_config):
        """P rows are rho, u, p, T, c of the current state."""
        solver = Solver1D(sod_config)
        P = solver.get_extended_state()

        assert P.shape == (5, 1000)
        np.testing.assert_allclose(P[2, :500], 10.0)
        np.testing.assert_allclose(P[3], 1.0)
        np.testing.assert_allclose(P[4], np.sqrt(1.4))

    def test_state_object(self, sod_config):
        """get_state returns primitive properties."""
        solver = Solver1D(sod_config)
        state = solver.get_state()

        assert state.rho[0] == 10.0
        assert state.rho[-1] == 1.0
        np.testing.assert_allclose(state.u, 0.0)

    def test_plot(self, tmp_path):
        """The solution plot is written to file."""
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt

        solver = Solver1D(SolverConfig(n_cells=50, steps=2, dt=1e-3, print_interval=0))
        solver.solve()
        filename = tmp_path / 'solution.png'
        fig = solver.plot_solution(str(filename), show=False)
        plt.close(fig)

        assert filename.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
