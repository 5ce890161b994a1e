"""Keyed table of pending overlays.

Keys are canonical absolute paths, so ``./a.txt`` and ``<root>/a.txt`` refer
to the same entry. The store holds only unresolved paths: saving or
discarding a path removes its entry.
"""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from diffstage.core.exceptions import OverlayNotFoundError
from diffstage.core.types.common import Overlay


class OverlayStore:
    def __init__(self, root_dir: str | Path):
        self._root_dir = os.path.abspath(str(root_dir))
        self._overlays: dict[str, Overlay] = {}

    @property
    def root_dir(self) -> str:
        return self._root_dir

    def set_root_dir(self, root_dir: str | Path) -> None:
        """Change the directory used to resolve relative paths.

        Existing entries keep the keys they were stored under.
        """
        self._root_dir = os.path.abspath(str(root_dir))

    def canonicalize(self, path: str | Path) -> str:
        """Resolve ``path`` against the root directory unless it is absolute."""
        raw = str(path)
        if os.path.isabs(raw):
            return os.path.normpath(raw)
        return os.path.normpath(os.path.join(self._root_dir, raw))

    def open(self, path: str | Path, initial_content: str, baseline: str = "") -> Overlay:
        """Create an overlay, or reset the working content of a pending one.

        The baseline of a pending overlay is kept; ``baseline`` only applies
        when a new entry is created.
        """
        key = self.canonicalize(path)
        overlay = self._overlays.get(key)
        if overlay is not None:
            overlay.working = initial_content
            logger.debug(f"Reopened overlay for {key}; keeping original baseline")
            return overlay

        overlay = Overlay(path=key, baseline=baseline, working=initial_content)
        self._overlays[key] = overlay
        logger.debug(f"Opened overlay for {key}")
        return overlay

    def get(self, path: str | Path) -> str:
        return self.get_overlay_or_raise(path).working

    def get_overlay(self, path: str | Path) -> Overlay | None:
        return self._overlays.get(self.canonicalize(path))

    def get_overlay_or_raise(self, path: str | Path) -> Overlay:
        key = self.canonicalize(path)
        overlay = self._overlays.get(key)
        if overlay is None:
            raise OverlayNotFoundError(key)
        return overlay

    def set(self, path: str | Path, content: str) -> None:
        self.get_overlay_or_raise(path).working = content

    def delete(self, path: str | Path) -> bool:
        """Remove the entry for ``path``; returns False if there was none."""
        removed = self._overlays.pop(self.canonicalize(path), None)
        return removed is not None

    def has(self, path: str | Path) -> bool:
        return self.canonicalize(path) in self._overlays

    def clear(self) -> int:
        count = len(self._overlays)
        self._overlays.clear()
        return count

    def paths(self) -> list[str]:
        return list(self._overlays)

    def __len__(self) -> int:
        return len(self._overlays)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.has(path)
