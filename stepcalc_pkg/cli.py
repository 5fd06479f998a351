from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from . import config
from .config import VERSION
from .dispatch import compute, operations, shapes
from .formatter import render_result
from .logging_config import get_logger, setup_logging
from .types import ComputationRequest, Domain, UnknownOperationError

logger = get_logger("cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def parse_assignments(pairs: list[str]) -> dict[str, str]:
    """Turn ``["a=12", "b=18"]`` into ``{"a": "12", "b": "18"}``.

    Raises:
        ValueError: if an item has no ``=`` or an empty key
    """
    inputs: dict[str, str] = {}
    for item in pairs:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}")
        inputs[key] = value
    return inputs


def catalogue() -> list[dict[str, Any]]:
    """Every registered operation with its parameters."""
    entries = []
    for spec in operations():
        entry: dict[str, Any] = {
            "domain": spec.domain.value,
            "operation": spec.name,
            "required": list(spec.required),
            "optional": list(spec.optional),
            "summary": spec.summary,
        }
        if spec.domain is Domain.GEOMETRY:
            entry["shapes"] = {name: list(params) for name, params in shapes().items()}
        entries.append(entry)
    return entries


def print_catalogue(output_format: str = "human") -> None:
    entries = catalogue()
    if output_format == "json":
        print(json.dumps(entries, indent=2, ensure_ascii=False))
        return
    for entry in entries:
        params = " ".join(entry["required"] + [f"[{p}]" for p in entry["optional"]])
        print(f"{entry['domain']:<14} {entry['operation']:<24} {params}")
        if entry["summary"]:
            print(f"{'':<14} {'':<24} {entry['summary']}")
        for name, dims in entry.get("shapes", {}).items():
            print(f"{'':<14} {'':<24} shape={name} {' '.join(dims)}")


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the stepcalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 for an invalid-input or domain-error
        result, 2 for usage errors and unknown operations)
    """
    parser = argparse.ArgumentParser(
        prog="stepcalc",
        description="Step-by-step calculator: every result comes with its derivation.",
    )
    parser.add_argument("domain", nargs="?", help="number-theory, algebra, geometry or trigonometry")
    parser.add_argument("operation", nargs="?", help="Operation name (see --list)")
    parser.add_argument("params", nargs="*", help="Inputs as key=value pairs")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Fractional digits shown for floating values"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument("--list", action="store_true", help="List available operations")
    parser.add_argument("-v", "--version", action="store_true", help="Show program version")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)
    # Apply CLI configuration overrides
    if args.precision is not None and args.precision >= 0:
        config.OUTPUT_PRECISION = int(args.precision)

    if args.version:
        print(VERSION)
        return EXIT_OK
    if args.list:
        print_catalogue(args.format)
        return EXIT_OK
    if not args.domain or not args.operation:
        parser.print_usage(sys.stderr)
        print("Error: DOMAIN and OPERATION are required (see --list)", file=sys.stderr)
        return EXIT_USAGE

    try:
        inputs = parse_assignments(args.params)
        request = ComputationRequest(args.domain, args.operation, inputs)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logger.debug(
        "CLI request %s/%s with %d input(s)", request.domain.value, request.operation, len(inputs)
    )
    try:
        result = compute(request)
    except UnknownOperationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    print(render_result(result, args.format))
    return EXIT_OK if result.ok else EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main_entry())
