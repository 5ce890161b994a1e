"""Overlay service: the request/response surface of the editing overlay engine.

An agent proposes new content for a file with ``open_diff``. The service
captures the file's current content as the baseline, keeps the proposal in
memory, and renders a diff for review. Further proposals can refine the
pending content (``replace_text``, ``truncate_document``) as it streams in.
Finally ``save_document`` writes it through the host workspace, or
``discard_document``/``close_all_diffs`` drops it without touching disk.

Every operation returns a response model. Failures are reported through
``success=False`` and a message; no exception escapes an operation.

Operations on the same path are serialized with a per-path lock because they
may suspend at file I/O. Operations on different paths run independently.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from diffstage.core.config.overlay_config import OverlayConfig
from diffstage.core.exceptions import NothingPendingError, OverlayError, WorkspaceIOError
from diffstage.core.types.common import (
    CloseAllDiffsResponse,
    DiscardDocumentRequest,
    GetDocumentTextRequest,
    GetDocumentTextResponse,
    OpenDiffRequest,
    OpenDiffResponse,
    OpenMultiFileDiffRequest,
    OpenMultiFileDiffResponse,
    OperationResponse,
    Overlay,
    OverlayEvent,
    ReplaceTextRequest,
    SaveDocumentRequest,
    ScrollDiffRequest,
    TruncateDocumentRequest,
)
from diffstage.interfaces.host_workspace import HostWorkspace
from diffstage.providers.workspace.local_workspace import LocalWorkspace
from diffstage.services.diff_presenter import render_diff
from diffstage.services.overlay_store import OverlayStore
from diffstage.services.range_editor import count_lines, replace_range, truncate_lines
from diffstage.utils.display import LoguruSink, MessageLevel, MessageSink
from diffstage.utils.keyed_lock import KeyedLock

RequestT = TypeVar("RequestT", bound=BaseModel)
OverlayListener = Callable[[OverlayEvent], None]


class OverlayService:
    """Stage, refine and commit proposed file edits."""

    def __init__(
        self,
        workspace: HostWorkspace | None = None,
        config: OverlayConfig | None = None,
        sink: MessageSink | None = None,
    ):
        """Initialize the overlay service.

        Args:
            workspace: File access backend (default: local disk)
            config: Engine configuration (default: ``OverlayConfig()``)
            sink: Receiver for human-facing messages (default: loguru)
        """
        self.config = config or OverlayConfig()
        self.workspace = workspace or LocalWorkspace(
            max_read_bytes=self.config.max_read_bytes
        )
        self._sink: MessageSink = sink or LoguruSink()
        self._store = OverlayStore(self.config.root_dir)
        self._locks = KeyedLock()
        self._listeners: list[OverlayListener] = []

    # Wiring

    @property
    def store(self) -> OverlayStore:
        return self._store

    def set_message_sink(self, sink: MessageSink) -> None:
        self._sink = sink

    def set_root_dir(self, root_dir: str | Path) -> None:
        self._store.set_root_dir(root_dir)

    def add_listener(self, listener: OverlayListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: OverlayListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def pending(self) -> list[str]:
        """Canonical paths that still have uncommitted changes."""
        return self._store.paths()

    def get_overlay(self, path: str | Path) -> Overlay | None:
        return self._store.get_overlay(path)

    def render(self, path: str | Path) -> list[str]:
        """Render the current diff of a pending overlay, or [] if none."""
        overlay = self._store.get_overlay(path)
        if overlay is None:
            return []
        return render_diff(overlay.baseline, overlay.working, overlay.path)

    # Operations

    async def open_diff(self, request: OpenDiffRequest | Mapping[str, Any]) -> OpenDiffResponse:
        """Open (or reopen) an overlay with proposed content and render its diff."""
        try:
            req = self._coerce(OpenDiffRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                overlay = self._store.get_overlay(key)
                if overlay is None:
                    baseline = await self._read_text(key) or ""
                else:
                    baseline = overlay.baseline
                overlay = self._store.open(key, req.content or "", baseline)

                if self.config.render_diffs:
                    for row in render_diff(overlay.baseline, overlay.working, key):
                        self._display(row)
                self._display(f"✅ Diff opened for: {key}")
                logger.info(
                    f"Opened overlay for {key} "
                    f"({'new file' if overlay.is_new_file else 'existing file'})"
                )
                self._emit(
                    OverlayEvent(
                        type="diff-opened",
                        path=key,
                        data={
                            "original_content": overlay.baseline,
                            "current_content": overlay.working,
                        },
                    )
                )
                return OpenDiffResponse(success=True, id=key)
        except Exception as e:
            message = self._report_failure("opening diff", e)
            return OpenDiffResponse(success=False, id=None, message=message)

    async def get_document_text(
        self, request: GetDocumentTextRequest | Mapping[str, Any]
    ) -> GetDocumentTextResponse:
        """Return pending content if any, otherwise the file's current content."""
        try:
            req = self._coerce(GetDocumentTextRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                overlay = self._store.get_overlay(key)
                if overlay is not None:
                    return GetDocumentTextResponse(content=overlay.working)

                content = await self._read_text(key)
                if content is None:
                    raise NothingPendingError(key, f"File not found: {key}")
                return GetDocumentTextResponse(content=content)
        except Exception as e:
            message = self._report_failure("reading document", e)
            return GetDocumentTextResponse(success=False, content="", message=message)

    async def replace_text(
        self, request: ReplaceTextRequest | Mapping[str, Any]
    ) -> OperationResponse:
        """Replace a 1-based inclusive line range, or all content, of an overlay."""
        try:
            req = self._coerce(ReplaceTextRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                overlay = await self._ensure_overlay(key, missing_ok=True)
                self._store.set(
                    key,
                    replace_range(
                        overlay.working, req.start_line, req.end_line, req.new_text
                    ),
                )

                if req.is_range:
                    self._display(
                        f"📝 Replaced lines {req.start_line}-{req.end_line} in {key}"
                    )
                else:
                    self._display(f"📝 Replaced entire content in {key}")
                self._emit(
                    OverlayEvent(
                        type="text-replaced",
                        path=key,
                        data={
                            "content": overlay.working,
                            "start_line": req.start_line,
                            "end_line": req.end_line,
                        },
                    )
                )
                return OperationResponse(success=True)
        except Exception as e:
            message = self._report_failure("replacing text", e)
            return OperationResponse(success=False, message=message)

    async def truncate_document(
        self, request: TruncateDocumentRequest | Mapping[str, Any]
    ) -> OperationResponse:
        """Keep only the first ``max_lines`` lines of an overlay."""
        try:
            req = self._coerce(TruncateDocumentRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                overlay = await self._ensure_overlay(key, missing_ok=False)
                before = count_lines(overlay.working)
                self._store.set(key, truncate_lines(overlay.working, req.max_lines))

                self._display(f"✂️ Truncated {key} to {req.max_lines} lines")
                logger.debug(
                    f"Truncated {key}: {before} -> {count_lines(overlay.working)} lines"
                )
                self._emit(
                    OverlayEvent(
                        type="document-truncated",
                        path=key,
                        data={"content": overlay.working, "line_number": req.max_lines},
                    )
                )
                return OperationResponse(success=True)
        except Exception as e:
            message = self._report_failure("truncating document", e)
            return OperationResponse(success=False, message=message)

    async def save_document(
        self, request: SaveDocumentRequest | Mapping[str, Any]
    ) -> OperationResponse:
        """Write an overlay's working content to disk and retire the overlay."""
        try:
            req = self._coerce(SaveDocumentRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                overlay = self._store.get_overlay(key)
                if overlay is None:
                    raise NothingPendingError(key)

                await self._write_text(key, overlay.working)
                self._store.delete(key)

                self._display(f"💾 Saved: {key}")
                logger.info(f"Committed overlay for {key}")
                self._emit(OverlayEvent(type="document-saved", path=key))
                return OperationResponse(success=True)
        except Exception as e:
            message = self._report_failure("saving document", e)
            return OperationResponse(success=False, message=message)

    async def discard_document(
        self, request: DiscardDocumentRequest | Mapping[str, Any]
    ) -> OperationResponse:
        """Drop a single overlay without writing it."""
        try:
            req = self._coerce(DiscardDocumentRequest, request)
            key = self._store.canonicalize(req.path)
            async with self._locks.hold(key):
                if not self._store.delete(key):
                    raise NothingPendingError(key, f"No pending changes for {key}")
                self._display(f"🚪 Discarded changes to {key}")
                self._emit(OverlayEvent(type="diff-closed", path=key))
                return OperationResponse(success=True)
        except Exception as e:
            message = self._report_failure("discarding document", e)
            return OperationResponse(success=False, message=message)

    async def close_all_diffs(self) -> CloseAllDiffsResponse:
        """Drop every pending overlay without writing; reports how many.

        Waits for in-flight path operations (a save mid-write, an open
        reading its baseline) so none of them lands after the clear.
        """
        async with self._locks.hold_all():
            count = self._store.clear()
        self._display(f"🚪 Closed {count} open diff documents")
        self._emit(OverlayEvent(type="diff-closed", data={"count": count}))
        return CloseAllDiffsResponse(success=True, discarded=count)

    async def open_multi_file_diff(
        self, request: OpenMultiFileDiffRequest | Mapping[str, Any]
    ) -> OpenMultiFileDiffResponse:
        """Open overlays for several files, in order."""
        try:
            req = self._coerce(OpenMultiFileDiffRequest, request)
            if not req.files:
                self._display("No files provided for multi-file diff", "warning")
                return OpenMultiFileDiffResponse(
                    success=False, message="No files provided for multi-file diff"
                )

            self._display(f"📚 Opening multi-file diff for {len(req.files)} files")
            results: list[OpenDiffResponse] = []
            for file_request in req.files:
                results.append(await self.open_diff(file_request))

            failed = [r for r in results if not r.success]
            if self.config.batch_policy == "all":
                success = not failed
            else:
                success = True
            message = None
            if failed:
                message = f"{len(failed)} of {len(results)} files failed to open"
                logger.warning(message)
            return OpenMultiFileDiffResponse(success=success, message=message, results=results)
        except Exception as e:
            message = self._report_failure("opening multi-file diff", e)
            return OpenMultiFileDiffResponse(success=False, message=message)

    async def scroll_diff(self, request: ScrollDiffRequest | Mapping[str, Any]) -> OperationResponse:
        """Display hint only; nothing to scroll in a headless engine."""
        try:
            req = self._coerce(ScrollDiffRequest, request)
        except Exception as e:
            message = self._report_failure("scrolling diff", e)
            return OperationResponse(success=False, message=message)

        self._display(f"📜 Scroll requested for diff: {req.diff_id}")
        if req.line_number:
            self._display(f"   Going to line: {req.line_number}")
        self._emit(
            OverlayEvent(
                type="scroll-to-line", path=req.diff_id, data={"line": req.line_number}
            )
        )
        return OperationResponse(success=True)

    # Shorthands

    async def open(self, path: str, content: str | None = None) -> OpenDiffResponse:
        return await self.open_diff({"path": path, "content": content})

    async def get_text(self, path: str) -> GetDocumentTextResponse:
        return await self.get_document_text({"path": path})

    async def replace(
        self,
        path: str,
        start_line: int | None = None,
        end_line: int | None = None,
        new_text: str | None = None,
    ) -> OperationResponse:
        return await self.replace_text(
            {"path": path, "start_line": start_line, "end_line": end_line, "new_text": new_text}
        )

    async def truncate(self, path: str, max_lines: int) -> OperationResponse:
        return await self.truncate_document({"path": path, "max_lines": max_lines})

    async def save(self, path: str) -> OperationResponse:
        return await self.save_document({"path": path})

    async def discard(self, path: str) -> OperationResponse:
        return await self.discard_document({"path": path})

    async def discard_all(self) -> CloseAllDiffsResponse:
        return await self.close_all_diffs()

    async def open_many(self, files: list[Mapping[str, Any]]) -> OpenMultiFileDiffResponse:
        return await self.open_multi_file_diff({"files": files})

    async def scroll(self, diff_id: str, line_number: int | None = None) -> OperationResponse:
        return await self.scroll_diff({"diff_id": diff_id, "line_number": line_number})

    # Internals

    async def _ensure_overlay(self, key: str, *, missing_ok: bool) -> Overlay:
        """Return the overlay for ``key``, fetching the baseline lazily.

        A missing file yields an empty overlay when ``missing_ok`` is set and
        raises ``NothingPendingError`` otherwise.
        """
        overlay = self._store.get_overlay(key)
        if overlay is not None:
            return overlay

        content = await self._read_text(key)
        if content is None:
            if not missing_ok:
                raise NothingPendingError(key, f"No content for {key}: file not found")
            content = ""
        return self._store.open(key, content, baseline=content)

    async def _read_text(self, key: str) -> str | None:
        """Read a file through the workspace; None means it does not exist."""
        try:
            data = await self.workspace.read_file(key)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise WorkspaceIOError(key, "read", e) from e
        try:
            return data.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            raise WorkspaceIOError(key, "decode", e) from e

    async def _write_text(self, key: str, content: str) -> None:
        try:
            data = content.encode(self.config.encoding)
        except UnicodeEncodeError as e:
            raise WorkspaceIOError(key, "encode", e) from e
        try:
            await self.workspace.ensure_directory(os.path.dirname(key))
        except OSError as e:
            raise WorkspaceIOError(key, "create directory for", e) from e
        try:
            await self.workspace.write_file(key, data)
        except OSError as e:
            raise WorkspaceIOError(key, "write", e) from e

    @staticmethod
    def _coerce(model: type[RequestT], request: RequestT | Mapping[str, Any]) -> RequestT:
        if isinstance(request, model):
            return request
        if isinstance(request, BaseModel):
            return model.model_validate(request.model_dump())
        return model.model_validate(dict(request))

    def _report_failure(self, action: str, error: Exception) -> str:
        if isinstance(error, NothingPendingError):
            message = str(error)
            logger.warning(message)
            self._display(message, "warning")
            return message

        if isinstance(error, ValidationError):
            detail = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in error.errors()
            )
            message = f"Invalid request: {detail}"
        elif isinstance(error, OverlayError):
            message = str(error)
        else:
            message = f"Unexpected error: {error}"

        logger.error(f"Error {action}: {message}")
        self._display(f"Error {action}: {message}", "error")
        return message

    def _display(self, message: str, level: MessageLevel = "info") -> None:
        try:
            self._sink(message, level)
        except Exception as e:
            logger.error(f"Message sink failed: {e}")

    def _emit(self, event: OverlayEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Overlay listener failed on {event.type}: {e}")
