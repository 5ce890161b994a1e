"""Diff command: stage proposed content for a file, show the diff, apply or discard."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from diffstage.core.config.overlay_config import OverlayConfig
from diffstage.services.diff_presenter import present_diff
from diffstage.services.line_differ import diff_stats
from diffstage.services.overlay_service import OverlayService
from diffstage.utils.display import CollectingSink, MessageSink, RichConsoleSink


def _read_proposed(source: Path, encoding: str) -> str:
    if str(source) == "-":
        return sys.stdin.read()
    return source.read_text(encoding=encoding)


async def diff_command(
    args: argparse.Namespace, config: OverlayConfig, sink: MessageSink | None = None
) -> int:
    """Run the diff command; returns a process exit code."""
    try:
        proposed = _read_proposed(args.proposed, config.encoding)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read proposed content from {args.proposed}: {e}", file=sys.stderr)
        return 2

    as_json = getattr(args, "json", False)
    if as_json:
        # Keep stdout clean for the JSON report
        sink = CollectingSink()
    elif sink is None:
        sink = RichConsoleSink()

    service = OverlayService(config=config, sink=sink)
    opened = await service.open(str(args.path), proposed)
    if not opened.success or opened.id is None:
        if as_json:
            print(json.dumps({"path": str(args.path), "error": opened.message}, indent=2))
        return 1

    overlay = service.get_overlay(opened.id)
    hunks = present_diff(overlay.baseline, overlay.working) if overlay else []

    if args.apply:
        result = await service.save(opened.id)
    else:
        result = await service.discard_all()

    if as_json:
        report = {
            "path": opened.id,
            "applied": bool(args.apply and result.success),
            "stats": diff_stats(hunks),
            "hunks": [
                {
                    "kind": h.kind.value,
                    "line": h.display_line_number,
                    "text": h.text,
                }
                for h in hunks
            ],
        }
        if not result.success:
            report["error"] = result.message
        print(json.dumps(report, indent=2))

    return 0 if result.success else 1
