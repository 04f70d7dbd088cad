"""
stillpoint command line interface.

Usage:
    stillpoint MODEL [--output PATH] [--limit N] [--time-budget S]

Reads a model file, enumerates its steady states and writes them to
``<model dir>/<model name>_stable.csv`` unless ``--output`` says otherwise.

Exit codes:
    0 - success
    1 - invalid options
    2 - the model could not be read
    3 - the steady state computation failed
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..core.model import Model
from ..core.types import SearchConfig, StillpointError, ValidationError
from ..formats.csv_sink import CsvSink
from ..formats.model_file import read_model, steady_output_path
from ..solver.compiler import compile_model
from ..solver.engine import SpaceSolver, iterate_limited
from ..solver.space import SteadySpace
from ..utils.metrics import print_steady_state_summary, steady_state_summary

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_OPTIONS = 1
EXIT_MODEL = 2
EXIT_SOLVER = 3


class _OptionError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad options."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise _OptionError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = _ArgumentParser(
        prog="stillpoint",
        description="Steady states of discrete multi-valued regulatory networks",
    )

    parser.add_argument(
        "model",
        help="Path to the model file",
    )
    parser.add_argument(
        "--steady",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Compute the steady states (default: on)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="CSV file for the steady states (default: <model>_stable.csv next to the model)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after this many steady states",
    )
    parser.add_argument(
        "--time-budget",
        type=float,
        default=None,
        help="Stop after this many seconds",
    )
    parser.add_argument(
        "--logic",
        choices=["godel", "lukasiewicz"],
        default="godel",
        help="Norms used for & and | on multi-valued levels",
    )
    parser.add_argument(
        "--keep-order",
        action="store_true",
        help="Keep species in file order instead of sorting them by name",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a summary of the steady states",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log search details",
    )

    return parser


def solve_steady_states(
    model_path: Path,
    model: Model,
    config: SearchConfig,
    output: Optional[Path] = None,
    summary: bool = False,
) -> Path:
    """
    Enumerate the steady states of ``model`` and write them as CSV.

    Returns:
        Path of the written CSV file
    """
    output_path = output or steady_output_path(model_path, model.name)
    solver = SpaceSolver(SteadySpace.from_model(model, config.logic))
    states = []

    with CsvSink.open(output_path, model.names) as sink:
        for state in iterate_limited(solver, config):
            sink.write(state)
            if summary:
                states.append(state)

    logger.info("Wrote %d steady states to %s", sink.rows_written, output_path)
    logger.debug("Search statistics: %s", solver.statistics.to_dict())

    if summary:
        print_steady_state_summary(steady_state_summary(states, model, solver.statistics))

    return output_path


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()

    try:
        args = parser.parse_args(argv)
        config = SearchConfig(
            max_results=args.limit,
            time_budget=args.time_budget,
            logic=args.logic,
        )
    except (_OptionError, ValidationError) as e:
        logging.basicConfig(level=logging.WARNING)
        logger.error("An exception occurred while parsing input options: %s", e)
        parser.print_usage(sys.stderr)
        return EXIT_OPTIONS

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    model_path = Path(args.model)
    try:
        model = read_model(model_path, sort=not args.keep_order)
        compile_model(model, config.logic)
    except StillpointError as e:
        logger.error("An exception occurred while reading the model file %s: %s", model_path, e)
        return EXIT_MODEL

    if not args.steady:
        return EXIT_OK

    try:
        solve_steady_states(
            model_path,
            model,
            config,
            output=Path(args.output) if args.output else None,
            summary=args.summary,
        )
    except (StillpointError, OSError) as e:
        logger.error("An exception occurred while computing the steady states: %s", e)
        return EXIT_SOLVER

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
