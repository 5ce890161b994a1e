"""Common types for diffstage.

Request and response models mirror the operations exposed by
``OverlayService``. Requests are validated with pydantic so malformed input
is reported as a failed response instead of raising at the call site.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class HunkKind(Enum):
    """Classification of a single diffed line."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"

    @property
    def prefix(self) -> str:
        """Marker used in front of a rendered diff row."""
        if self is HunkKind.ADDED:
            return "+"
        if self is HunkKind.REMOVED:
            return "-"
        return " "


@dataclass(frozen=True)
class DiffHunk:
    """One line of a line-level diff."""

    kind: HunkKind
    text: str
    display_line_number: int | None = None


@dataclass
class Overlay:
    """Pending, uncommitted content for a single file."""

    path: str
    baseline: str
    working: str

    @property
    def is_new_file(self) -> bool:
        return self.baseline == ""


@dataclass
class OverlayEvent:
    """Notification emitted to listeners when an overlay changes."""

    type: str
    path: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


# Requests


class OpenDiffRequest(BaseModel):
    path: str = Field(min_length=1, description="File to open an overlay for")
    content: str | None = Field(default=None, description="Proposed content")


class GetDocumentTextRequest(BaseModel):
    path: str = Field(min_length=1)


class ReplaceTextRequest(BaseModel):
    path: str = Field(min_length=1)
    start_line: int | None = Field(default=None, description="1-based, inclusive")
    end_line: int | None = Field(default=None, description="1-based, inclusive")
    new_text: str | None = None

    @property
    def is_range(self) -> bool:
        return self.start_line is not None and self.end_line is not None


class TruncateDocumentRequest(BaseModel):
    path: str = Field(min_length=1)
    max_lines: int = Field(ge=0, description="Number of leading lines to keep")


class SaveDocumentRequest(BaseModel):
    path: str = Field(min_length=1)


class DiscardDocumentRequest(BaseModel):
    path: str = Field(min_length=1)


class ScrollDiffRequest(BaseModel):
    diff_id: str
    line_number: int | None = None


class OpenMultiFileDiffRequest(BaseModel):
    # Entries are validated one at a time when opened, so a bad entry only
    # fails its own result
    files: list[OpenDiffRequest | dict[str, Any]] = Field(default_factory=list)


# Responses


class OperationResponse(BaseModel):
    success: bool
    message: str | None = None


class OpenDiffResponse(OperationResponse):
    id: str | None = None


class GetDocumentTextResponse(OperationResponse):
    success: bool = True
    content: str = ""


class CloseAllDiffsResponse(OperationResponse):
    discarded: int = 0


class OpenMultiFileDiffResponse(OperationResponse):
    results: list[OpenDiffResponse] = Field(default_factory=list)
