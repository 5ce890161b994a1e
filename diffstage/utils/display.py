"""Message sinks for human-facing output.

The overlay engine reports progress ("Saved: …", rendered diffs, failures)
through a sink so that the host decides where messages end up. Without an
explicit sink, messages go to the loguru logger.
"""

from __future__ import annotations

from typing import Callable, Literal

from loguru import logger
from rich.console import Console
from rich.text import Text

MessageLevel = Literal["info", "warning", "error"]
MessageSink = Callable[[str, MessageLevel], None]


class LoguruSink:
    """Route messages to the loguru logger at the matching level."""

    def __call__(self, message: str, level: MessageLevel = "info") -> None:
        if level == "error":
            logger.error(message)
        elif level == "warning":
            logger.warning(message)
        else:
            logger.info(message)


class RichConsoleSink:
    """Print messages to a terminal, colouring diff rows."""

    _PREFIXES = {"error": "❌", "warning": "⚠️"}

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def __call__(self, message: str, level: MessageLevel = "info") -> None:
        if level in self._PREFIXES:
            style = "red" if level == "error" else "yellow"
            self.console.print(Text(f"{self._PREFIXES[level]} {message}", style=style))
            return
        self.console.print(Text(message, style=self._diff_style(message)))

    @staticmethod
    def _diff_style(message: str) -> str:
        if message.startswith("+ "):
            return "green"
        if message.startswith("- "):
            return "red"
        return ""


class CollectingSink:
    """Keep messages in memory; used by callers that post-process output."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, MessageLevel]] = []

    def __call__(self, message: str, level: MessageLevel = "info") -> None:
        self.messages.append((message, level))

    def lines(self, level: MessageLevel | None = None) -> list[str]:
        return [m for m, lvl in self.messages if level is None or lvl == level]
