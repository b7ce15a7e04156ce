"""
Pytest tests for configuration files, solution output and the command line.

Tests verify:
1. JSON configurations round trip and reject unknown keys
2. Solution files hold x = i dx and three fields per cell
3. The command line prints the first cells and writes outputs
4. Command line errors give non-zero exit codes
"""

import json
import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from shll.src import Solver1D, SolverConfig
from shll.src.config import load_config, save_config
from shll.src.output import solution_fields, write_solution, read_solution, format_cells
from shll.__main__ import main


@pytest.fixture
def uniform_solver():
    """Finished uniform-flow run with open boundaries."""
    config = SolverConfig(n_cells=50, steps=5, dt=1e-3, initial_condition='uniform',
                          boundary='transmissive', print_interval=0)
    solver = Solver1D(config)
    solver.solve()
    return solver


class TestConfigFiles:
    """Tests for JSON configuration files."""

    def test_round_trip(self, tmp_path):
        """A saved configuration loads back unchanged."""
        config = SolverConfig(n_cells=200, steps=7, splitting='shll', boundary='periodic')
        path = save_config(config, tmp_path / 'run.json')

        assert load_config(path) == config

    def test_partial_file(self, tmp_path):
        """Missing keys take their defaults."""
        path = tmp_path / 'run.json'
        path.write_text(json.dumps({'steps': 3}))

        config = load_config(path)
        assert config.steps == 3
        assert config.n_cells == 1000

    def test_overrides(self, tmp_path):
        """Overrides replace file values."""
        path = tmp_path / 'run.json'
        path.write_text(json.dumps({'steps': 3, 'dt': 1e-4}))

        config = load_config(path, steps=9)
        assert config.steps == 9
        assert config.dt == pytest.approx(1e-4)

    def test_unknown_key(self, tmp_path):
        """Typos are reported rather than ignored."""
        path = tmp_path / 'run.json'
        path.write_text(json.dumps({'stpes': 3}))

        with pytest.raises(ValueError, match="stpes"):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        """The file must hold a JSON object."""
        path = tmp_path / 'run.json'
        path.write_text(json.dumps([1, 2, 3]))

        with pytest.raises(ValueError):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        """Values are validated like direct construction."""
        path = tmp_path / 'run.json'
        path.write_text(json.dumps({'dt': -1.0}))

        with pytest.raises(ValueError):
            load_config(path)


class TestSolutionOutput:
    """Tests for solution files."""

    def test_primitive_fields(self, uniform_solver):
        """Primitive output is rho, u, p with x = i dx."""
        x, values = solution_fields(uniform_solver, 'primitive')

        np.testing.assert_allclose(x, np.arange(50) * 0.02)
        np.testing.assert_allclose(values[0], 1.0)
        np.testing.assert_allclose(values[1], 0.5)
        np.testing.assert_allclose(values[2], 1.0)

    def test_conserved_fields(self, uniform_solver):
        """Conserved output is rho, rhoU, rhoE."""
        _, values = solution_fields(uniform_solver, 'conserved')
        np.testing.assert_allclose(values[2], 2.625)

    def test_unknown_field(self, uniform_solver):
        """Only primitive and conserved are known."""
        with pytest.raises(ValueError):
            solution_fields(uniform_solver, 'entropy')

    def test_file_round_trip(self, uniform_solver, tmp_path):
        """Written files read back to the same values."""
        x, values = solution_fields(uniform_solver, 'primitive')
        path = write_solution(tmp_path / 'solution.dat', x, values)

        x_read, values_read = read_solution(path)
        np.testing.assert_allclose(x_read, x, rtol=1e-9)
        np.testing.assert_allclose(values_read, values, rtol=1e-9)

    def test_file_layout(self, uniform_solver, tmp_path):
        """One line per cell with four columns."""
        x, values = solution_fields(uniform_solver, 'primitive')
        path = write_solution(tmp_path / 'solution.dat', x, values)

        lines = path.read_text().splitlines()
        assert len(lines) == 50
        assert all(len(line.split()) == 4 for line in lines)

    def test_format_cells(self):
        """Summary lines for the first cells."""
        values = np.array([[1.0, 2.0, 3.0], [0.5, 0.25, 0.0], [1.0, 1.0, 1.0]])
        lines = format_cells(values, n=2)

        assert lines == ["Cell [0] state = 1.00, 0.50, 1.00",
                         "Cell [1] state = 2.00, 0.25, 1.00"]

    def test_format_fewer_cells(self):
        """Never more lines than cells."""
        assert len(format_cells(np.ones((3, 4)))) == 4


class TestCommandLine:
    """Tests for the shll-1d entry point."""

    def test_prints_first_cells(self, capsys):
        """The first ten cells are printed."""
        code = main(['-n', '100', '-s', '5', '--initial-condition', 'uniform',
                     '--boundary', 'periodic', '--print-interval', '0'])
        out = capsys.readouterr().out.splitlines()

        assert code == 0
        assert len(out) == 10
        assert out[0] == "Cell [0] state = 1.00, 0.50, 1.00"
        assert out[9].startswith("Cell [9] state = ")

    def test_writes_outputs(self, tmp_path, capsys):
        """Solution, plot and configuration files are written."""
        output = tmp_path / 'solution.dat'
        plot = tmp_path / 'solution.png'
        saved = tmp_path / 'run.json'

        code = main(['-n', '40', '-s', '3', '--dt', '1e-3', '--field', 'conserved',
                     '--output', str(output), '--plot', str(plot), '--save-config', str(saved)])

        assert code == 0
        assert output.exists() and plot.exists()
        assert load_config(saved).n_cells == 40

        x, values = read_solution(output)
        assert values.shape == (3, 40)
        np.testing.assert_allclose(x, np.arange(40) / 40)

    def test_config_file_with_override(self, tmp_path, capsys):
        """Options given on the command line override the file."""
        path = save_config(SolverConfig(n_cells=30, steps=2, dt=1e-3, print_interval=0),
                           tmp_path / 'run.json')
        output = tmp_path / 'solution.dat'

        code = main(['--config', str(path), '-n', '20', '--output', str(output)])

        assert code == 0
        _, values = read_solution(output)
        assert values.shape == (3, 20)

    def test_abort_exit_code(self, capsys):
        """An unstable run exits with status 1 and names the cell."""
        code = main(['--dt', '0.01'])
        err = capsys.readouterr().err

        assert code == 1
        assert "cell 499 at step 1" in err

    @pytest.mark.parametrize("field", ['conserved', 'primitive'])
    def test_final_step_abort_exit_code(self, capsys, field):
        """A run that goes non-physical on its last step exits with status 1."""
        code = main(['--steps', '1', '--dt', '0.01', '--field', field])
        captured = capsys.readouterr()

        assert code == 1
        assert "cell 499 at step 1" in captured.err
        assert captured.out == ""

    def test_invalid_config_exit_code(self, capsys):
        """Invalid settings exit with status 2."""
        code = main(['--dt', '-1'])
        assert code == 2
        assert "invalid configuration" in capsys.readouterr().err

    def test_unknown_backend_exit_code(self, capsys):
        """Unknown backends are refused by argparse."""
        with pytest.raises(SystemExit):
            main(['--backend', 'gpu'])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
