"""
Command line entry point.

    python -m shll --steps 100 --dt 3e-4 -v
    shll-1d --config run.json --output solution.dat --plot solution.png
"""

import argparse
import dataclasses
import logging
import sys

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from shll.src.solver import Solver1D, SolverConfig
from shll.src.config import load_config, save_config
from shll.src.output import FIELDS, solution_fields, write_solution, format_cells
from shll.src.flux import SPLITTINGS
from shll.src.boundary import BOUNDARIES
from shll.src.initial import INITIAL_CONDITIONS
from shll.src.dispatch import DISPATCHERS
from shll.src.errors import ShllError, NonPhysicalStateError

logger = logging.getLogger('shll')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shll-1d",
        description="Solve the 1D Euler equations with an explicit split-flux finite volume scheme.")

    parser.add_argument("--config", help="JSON configuration file; options given here override it")
    parser.add_argument("--save-config", metavar="FILE", help="write the effective configuration as JSON")

    run = parser.add_argument_group("run")
    run.add_argument("-n", "--n-cells", type=int, help="number of interior cells (default: 1000)")
    run.add_argument("-s", "--steps", type=int, help="number of time steps (default: 100)")
    run.add_argument("--dt", type=float, help="fixed time step (default: 3e-4)")
    run.add_argument("--length", type=float, help="domain length (default: 1.0)")
    run.add_argument("--gamma", type=float, help="ratio of specific heats (default: 1.4)")
    run.add_argument("--R", type=float, dest="R", help="specific gas constant (default: 1.0)")
    run.add_argument("--initial-condition", choices=sorted(INITIAL_CONDITIONS),
                     help="initial state (default: sod)")
    run.add_argument("--splitting", choices=sorted(SPLITTINGS),
                     help="flux splitting (default: lax-friedrichs)")
    run.add_argument("--boundary", choices=sorted(BOUNDARIES),
                     help="boundary condition on both ends (default: reflective)")
    run.add_argument("--backend", choices=sorted(DISPATCHERS),
                     help="per-cell compute backend (default: vectorized)")
    run.add_argument("-j", "--n-jobs", type=int, help="threads for the threaded backend (default: all)")
    run.add_argument("--max-work-group-size", type=int,
                     help="largest work group for the threaded backend (default: 256)")
    run.add_argument("--print-interval", type=int, help="log progress every N steps, 0 to disable")

    out = parser.add_argument_group("output")
    out.add_argument("-o", "--output", help="write the solution to a text file")
    out.add_argument("--field", choices=FIELDS, default="primitive",
                     help="fields to print and write (default: primitive)")
    out.add_argument("--plot", metavar="FILE", help="save a plot of the solution")

    parser.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    parser.add_argument("-vv", "--very-verbose", action="store_true", help="enable very verbose output")
    return parser


def configure_logging(verbose: bool = False, very_verbose: bool = False):
    if very_verbose:
        logger.setLevel(logging.DEBUG)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)
        ch = logging.StreamHandler(stream=sys.stderr)
        ch.setLevel(logging.WARNING)

    # Create formatter for message output
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ch.setFormatter(formatter)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(ch)


def config_from_args(args) -> SolverConfig:
    """Build the run configuration from the parsed arguments."""
    overrides = {}
    for field in dataclasses.fields(SolverConfig):
        value = getattr(args, field.name, None)
        if value is not None:
            overrides[field.name] = value

    if args.config:
        return load_config(args.config, **overrides)
    return SolverConfig(**overrides)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.very_verbose)

    try:
        config = config_from_args(args)
    except (OSError, ValueError) as err:
        print(f"shll-1d: invalid configuration: {err}", file=sys.stderr)
        return 2

    if args.save_config:
        save_config(config, args.save_config)

    try:
        solver = Solver1D(config)
        solver.solve()
        x, values = solution_fields(solver, args.field)
    except NonPhysicalStateError as err:
        print(f"shll-1d: run aborted: {err}", file=sys.stderr)
        return 1
    except (ShllError, ValueError) as err:
        print(f"shll-1d: {err}", file=sys.stderr)
        return 2

    for line in format_cells(values):
        print(line)

    if args.output:
        write_solution(args.output, x, values)
        logger.info("Wrote %s solution to %s", args.field, args.output)

    if args.plot:
        fig = solver.plot_solution(args.plot, show=False)
        plt.close(fig)

    return 0


if __name__ == "__main__":
    sys.exit(main())
