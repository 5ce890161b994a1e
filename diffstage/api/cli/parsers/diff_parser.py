"""Diff command argument parser for diffstage CLI."""

import argparse
from pathlib import Path
from typing import Any, cast

from diffstage.core.config.overlay_config import OverlayConfig


def add_diff_subparser(subparsers: Any) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "diff",
        help="Stage proposed content for a file and show the diff",
        description=(
            "Open an overlay for PATH with the content of --proposed, print the "
            "line diff against the file on disk, then apply or discard it."
        ),
    )

    parser.add_argument(
        "path",
        type=Path,
        help="File to stage changes for (relative paths resolve against --root)",
    )

    parser.add_argument(
        "--proposed",
        type=Path,
        required=True,
        help="File holding the proposed content ('-' reads stdin)",
    )

    parser.add_argument(
        "--apply",
        action="store_true",
        help="Write the proposed content to PATH after showing the diff",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON report instead of a rendered diff",
    )

    OverlayConfig.add_cli_arguments(parser)

    return cast(argparse.ArgumentParser, parser)


__all__: list[str] = ["add_diff_subparser"]
