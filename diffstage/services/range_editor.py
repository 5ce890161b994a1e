"""Line-range replacement and truncation of overlay content.

Both helpers work on plain strings and split on ``"\\n"`` exactly, so a
trailing newline counts as an empty final line.
"""

from __future__ import annotations


def count_lines(content: str) -> int:
    """Number of lines in ``content``; an empty string has none."""
    if content == "":
        return 0
    return content.count("\n") + 1


def replace_range(
    content: str,
    start_line: int | None = None,
    end_line: int | None = None,
    new_text: str | None = None,
) -> str:
    """Return ``content`` with a line range (or everything) replaced.

    With both bounds given, ``start_line`` and ``end_line`` are 1-based and
    inclusive: lines ``start_line..end_line`` are removed and the lines of
    ``new_text`` are spliced in their place. Out-of-range bounds are clamped.
    Without bounds, ``new_text`` replaces the whole content.
    """
    if start_line is None or end_line is None:
        return new_text or ""

    lines = content.split("\n")
    start = min(max(0, start_line - 1), len(lines))
    # end_line is inclusive 1-based, which is the exclusive 0-based slice end
    end = min(max(0, end_line), len(lines))
    end = max(end, start)

    new_lines = new_text.split("\n") if new_text else []
    return "\n".join(lines[:start] + new_lines + lines[end:])


def truncate_lines(content: str, max_lines: int) -> str:
    """Keep only the first ``max_lines`` lines of ``content``."""
    if max_lines < 0:
        raise ValueError(f"max_lines must be >= 0, got {max_lines}")
    if count_lines(content) <= max_lines:
        return content
    return "\n".join(content.split("\n")[:max_lines])
