"""Command-line entry point: encode solutions read from stdin.

Run with: swap-encode --chain ethereum < solution.json

The input is a single solution object, a list of solutions, or an object
with a ``solutions`` list. The output is the transactions as JSON, one
list per solution.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from encoder.config import Chain
from encoder.errors import EncodingError, InvalidInputError
from encoder.models.solution import Solution
from encoder.router import RouterEncoder
from encoder.strategies.registry import StrategyRegistry

logger = structlog.get_logger()

_SOLUTIONS = TypeAdapter(list[Solution])


def parse_solutions(raw: str) -> list[Solution]:
    """Parse stdin into solutions.

    Raises:
        InvalidInputError: If the input is not valid JSON or not a solution
    """
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as err:
        raise InvalidInputError(f"Input is not valid JSON: {err}") from err

    if isinstance(data, dict):
        data = data["solutions"] if "solutions" in data else [data]
    try:
        return _SOLUTIONS.validate_python(data)
    except ValidationError as err:
        raise InvalidInputError(f"Invalid solution: {err}") from err


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swap-encode",
        description="Encode swap solutions into router call data",
    )
    parser.add_argument(
        "--chain",
        required=True,
        choices=[chain.value for chain in Chain],
        help="Target chain",
    )
    parser.add_argument(
        "--executors-file-path",
        default=None,
        help="Executor address table (JSON) replacing the bundled one",
    )
    parser.add_argument(
        "--router-address",
        default=None,
        help="Router address replacing the chain default",
    )
    parser.add_argument(
        "--swapper-pk",
        default=None,
        help="Swapper private key; enables Permit2 transfers",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Logs go to stderr so stdout stays valid JSON
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )

    try:
        solutions = parse_solutions(sys.stdin.read())
        registry = StrategyRegistry.from_files(
            args.chain,
            executors_path=args.executors_file_path,
            signer_key=args.swapper_pk,
        )
        encoder = RouterEncoder(registry, router_address=args.router_address)
        transactions = encoder.encode_router_calldata_sync(solutions)
    except EncodingError as error:
        logger.error("encode_failed", kind=error.kind, error=error.message)
        print(str(error), file=sys.stderr)
        return 1

    output = [[tx.model_dump(mode="json") for tx in txs] for txs in transactions]
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
