"""Local filesystem implementation of the host workspace."""

import asyncio
from pathlib import Path

from loguru import logger

from diffstage.interfaces.host_workspace import HostWorkspace


class LocalWorkspace(HostWorkspace):
    """Host workspace backed by the local disk.

    Blocking file calls run in a worker thread so the event loop only
    suspends at file I/O.
    """

    def __init__(self, max_read_bytes: int | None = None):
        self._max_read_bytes = max_read_bytes

    @property
    def name(self) -> str:
        return "local"

    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(self._read_bytes, Path(path))

    async def write_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(Path(path).write_bytes, data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    async def ensure_directory(self, path: str) -> None:
        await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)

    async def list_dir(self, path: str) -> list[str]:
        return await asyncio.to_thread(self._list_dir, Path(path))

    def _read_bytes(self, p: Path) -> bytes:
        if self._max_read_bytes is not None and p.is_file():
            size = p.stat().st_size
            if size > self._max_read_bytes:
                raise OSError(f"Refusing to read {size} bytes (limit {self._max_read_bytes})")
        return p.read_bytes()

    def _list_dir(self, p: Path) -> list[str]:
        if not p.exists():
            raise FileNotFoundError(str(p))
        if not p.is_dir():
            raise NotADirectoryError(str(p))
        out: list[str] = []
        for child in sorted(p.iterdir(), key=lambda c: c.name.lower()):
            suffix = "/" if child.is_dir() else ""
            out.append(child.name + suffix)
        return out
