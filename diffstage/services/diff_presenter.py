"""Format line diffs for human review.

Rows carry a running line counter that follows the *resulting* document:
added and unchanged lines advance it, removed lines are shown with the
number of the line they would have occupied and do not advance it.
"""

from __future__ import annotations

from dataclasses import replace

from diffstage.core.types.common import DiffHunk, HunkKind
from diffstage.services.line_differ import diff_lines

RULE = "─" * 60


def number_hunks(hunks: list[DiffHunk], start: int = 1) -> list[DiffHunk]:
    """Return copies of ``hunks`` with ``display_line_number`` filled in."""
    line_number = start
    numbered: list[DiffHunk] = []
    for hunk in hunks:
        numbered.append(replace(hunk, display_line_number=line_number))
        if hunk.kind is not HunkKind.REMOVED:
            line_number += 1
    return numbered


def format_hunk(hunk: DiffHunk) -> str:
    number = hunk.display_line_number if hunk.display_line_number is not None else 0
    return f"{hunk.kind.prefix} {number:>3}: {hunk.text}"


def present_diff(baseline: str, candidate: str) -> list[DiffHunk]:
    """Diff two texts and number the result for display."""
    return number_hunks(diff_lines(baseline, candidate))


def render_diff(baseline: str, candidate: str, path: str) -> list[str]:
    """Render a framed, numbered diff as a list of display lines."""
    rows = [f"\n📄 Diff for: {path}", RULE]
    rows.extend(format_hunk(hunk) for hunk in present_diff(baseline, candidate))
    rows.append(RULE)
    return rows
