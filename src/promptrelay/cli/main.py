"""Command line interface for promptrelay."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import cast

from ..config import DEFAULT_CACHE_DIR, RelayConfig
from ..exceptions import ConfigurationError
from .inspect_cmd import VerbosityArg, run_cached, run_inspect


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promptrelay")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the MCP server on stdio")

    default_cache = Path(os.environ.get("PROMPTRELAY_CACHE_DIR") or DEFAULT_CACHE_DIR)

    inspect_parser = subparsers.add_parser("inspect", help="Inspect a cached trace")
    inspect_parser.add_argument("trace_id", help="ID of a trace in the local cache")
    inspect_parser.add_argument(
        "--cache-dir",
        type=Path,
        default=default_cache,
        help="Trace cache directory",
    )
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

    cached_parser = subparsers.add_parser("cached", help="List cached trace IDs")
    cached_parser.add_argument(
        "--cache-dir",
        type=Path,
        default=default_cache,
        help="Trace cache directory",
    )
    return parser


def configure_logging(level: str | None = None) -> None:
    # stdout carries the protocol, so logs go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=(level or os.environ.get("PROMPTRELAY_LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


def run_serve() -> int:
    from ..server import PromptRelay, serve_stdio

    try:
        config = RelayConfig.from_env()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    configure_logging()
    asyncio.run(serve_stdio(PromptRelay.from_config(config)))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return run_serve()
    if args.command == "inspect":
        return run_inspect(
            args.trace_id,
            args.cache_dir,
            cast(VerbosityArg, args.verbosity),
            as_json=args.json,
            output_path=args.output,
        )
    if args.command == "cached":
        return run_cached(args.cache_dir)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
