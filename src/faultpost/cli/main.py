"""Command line interface for faultpost."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import cast

from .drain_cmd import run_drain
from .inspect_cmd import VerbosityArg, run_inspect


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="faultpost")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Inspect a payload file written with write_to_file"
    )
    inspect_parser.add_argument("payload_file", type=Path, help="Path to a JSON-lines payload file")
    inspect_parser.add_argument(
        "--verbosity",
        choices=["minimal", "standard", "full"],
        default="standard",
        help="Console render verbosity",
    )
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable summary JSON instead of text output",
    )
    inspect_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional output file path for --json summary",
    )

    drain_parser = subparsers.add_parser("drain", help="Deliver every job queued in a spool directory")
    drain_parser.add_argument("spool_dir", type=Path, help="Spool directory used by SpoolHandler")
    drain_parser.add_argument("--endpoint", default=None, help="Collector endpoint URL")
    drain_parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    drain_parser.add_argument(
        "--write-to",
        type=Path,
        default=None,
        help="Append payloads to this file instead of sending them",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "inspect":
        return run_inspect(
            args.payload_file,
            cast(VerbosityArg, args.verbosity),
            as_json=args.json,
            output_path=args.output,
        )
    if args.command == "drain":
        return run_drain(
            args.spool_dir,
            endpoint=args.endpoint,
            timeout=args.timeout,
            write_to=args.write_to,
        )

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
