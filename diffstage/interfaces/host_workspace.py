"""Host workspace interface.

The overlay engine never touches the filesystem directly. Everything it reads
or writes goes through a ``HostWorkspace``, which may be backed by the local
disk, an editor API or a remote process.
"""

from abc import ABC, abstractmethod


class HostWorkspace(ABC):
    """Abstract file access used by the overlay engine."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Return the current bytes of ``path``.

        Raises:
            FileNotFoundError: If the file does not exist.
            OSError: On any other read failure.
        """
        ...

    @abstractmethod
    async def write_file(self, path: str, data: bytes) -> None:
        """Replace the contents of ``path`` with ``data``."""
        ...

    @abstractmethod
    async def ensure_directory(self, path: str) -> None:
        """Create ``path`` and any missing parents."""
        ...

    @abstractmethod
    async def list_dir(self, path: str) -> list[str]:
        """List entry names of a directory; directories end with '/'."""
        ...
