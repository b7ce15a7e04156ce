"""
Test cases for the 1D split-flux Euler solver.

Run tests with pytest:
    pytest shll/tests/ -v

Or run individual test files:
    pytest shll/tests/test_solver.py -v
    pytest shll/tests/test_shock_tube.py -v
"""

from .shock_tube import run_shock_tube_test, sod_shock_tube_exact, sod_states

__all__ = [
    'run_shock_tube_test',
    'sod_shock_tube_exact',
    'sod_states',
]
