"""Command line interface package for stagegate."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from stagegate import __version__
from stagegate.config import Config

from .check import add_check_subparser, add_show_subparser


def build_parser() -> argparse.ArgumentParser:
    """Build the root argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="stagegate",
        description="stagegate – gate pipeline stages on a marker file",
    )
    parser.add_argument("--version", action="version", version=f"stagegate {__version__}")
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to JSON configuration file")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    add_check_subparser(subparsers)
    add_show_subparser(subparsers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    cfg = Config(config_file=args.config)
    logging.basicConfig(
        level=cfg.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    issues = cfg.validate()
    if issues:
        for issue in issues:
            print(f"configuration error: {issue}", file=sys.stderr)
        return 2

    result = args.func(args, cfg)

    if isinstance(result, int):
        return result

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point guard
    sys.exit(main())
