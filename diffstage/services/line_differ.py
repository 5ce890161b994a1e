"""Line-level diff between a baseline and a candidate text.

The differ is pure: it takes two strings and returns one ``DiffHunk`` per
line, classified as added, removed or unchanged. At every divergence point the
removed run is emitted before the added run, the same shape a classic
two-file line diff produces.
"""

from __future__ import annotations

import difflib

from diffstage.core.types.common import DiffHunk, HunkKind


def split_lines(text: str) -> list[str]:
    """Split text into lines for diffing.

    A trailing newline terminates the last line rather than starting a new
    empty one, so ``"a\\n"`` is one line and ``""`` is none.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def diff_lines(baseline: str, candidate: str) -> list[DiffHunk]:
    """Compute the line diff turning ``baseline`` into ``candidate``."""
    old = split_lines(baseline)
    new = split_lines(candidate)

    # autojunk would treat frequent lines (blank lines, braces) as noise and
    # produce a less minimal diff on larger files
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)

    hunks: list[DiffHunk] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            hunks.extend(DiffHunk(HunkKind.UNCHANGED, line) for line in old[i1:i2])
            continue
        if tag in ("replace", "delete"):
            hunks.extend(DiffHunk(HunkKind.REMOVED, line) for line in old[i1:i2])
        if tag in ("replace", "insert"):
            hunks.extend(DiffHunk(HunkKind.ADDED, line) for line in new[j1:j2])
    return hunks


def diff_stats(hunks: list[DiffHunk]) -> dict[str, int]:
    """Count hunks per kind."""
    stats = {kind.value: 0 for kind in HunkKind}
    for hunk in hunks:
        stats[hunk.kind.value] += 1
    return stats
