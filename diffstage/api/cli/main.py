"""Entry point for the diffstage command line."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Any

from loguru import logger
from pydantic import ValidationError

from diffstage.api.cli.parsers.diff_parser import add_diff_subparser
from diffstage.core.config.overlay_config import OverlayConfig
from diffstage.version import __version__


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru for CLI use."""
    logger.remove()
    level = "DEBUG" if verbose or os.getenv("DIFFSTAGE_DEBUG") else "WARNING"
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {name}:{function}:{line} - {message}",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffstage",
        description="Stage, review and commit proposed file edits",
    )
    parser.add_argument("--version", action="version", version=f"diffstage {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")
    add_diff_subparser(subparsers)
    return parser


async def async_main(args: Any) -> int:
    try:
        config = OverlayConfig.load(args)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if args.command == "diff":
        from diffstage.api.cli.commands.diff import diff_command

        return await diff_command(args, config)

    logger.error(f"Unknown command: {args.command}")
    return 2


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        return 2

    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
