"""Source readers: where .env text comes from.

A reader returns the text of a source, or None when the source does not
exist. Any other failure (permissions, a directory in place of a file,
undecodable bytes) is raised as is; the loader does not turn it into an
empty configuration.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from dotenv import find_dotenv


@runtime_checkable
class SourceReader(Protocol):
    """Protocol for source readers.

    Example:
        class HttpSourceReader:
            def read(self, path: str) -> Optional[str]:
                ...
            async def read_async(self, path: str) -> Optional[str]:
                ...
            def locate(self, path: str) -> str:
                return path
    """

    def read(self, path: str) -> Optional[str]:
        """Read a source, blocking.

        Args:
            path: Source identifier

        Returns:
            Text content, or None if the source does not exist
        """
        ...

    async def read_async(self, path: str) -> Optional[str]:
        """Read a source without blocking the event loop.

        Same contract as ``read``.
        """
        ...

    def locate(self, path: str) -> str:
        """Resolve a source identifier before reading it.

        Used when parent directory search is enabled. Readers without a
        notion of directories return the identifier unchanged.
        """
        ...


class FileSourceReader:
    """Read sources from the local filesystem."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read(self, path: str) -> Optional[str]:
        try:
            data = Path(path).read_bytes()
        except FileNotFoundError:
            return None
        return data.decode(self.encoding)

    async def read_async(self, path: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.read, path)

    def locate(self, path: str) -> str:
        """Find ``path`` in the working directory or one of its parents.

        Absolute paths and paths that already exist are returned as given,
        as is ``path`` itself when no parent directory contains it.
        """
        candidate = Path(path)
        if candidate.is_absolute() or candidate.exists():
            return path

        found = find_dotenv(path, raise_error_if_not_found=False, usecwd=True)
        return found or path


class MemorySourceReader:
    """In-memory source reader for tests.

    Example:
        reader = MemorySourceReader({".env": "FOO=bar\\n"})
        reader.fail(".env.defaults", PermissionError("denied"))
    """

    def __init__(self, files: Optional[Mapping[str, str]] = None) -> None:
        self._files: Dict[str, str] = dict(files or {})
        self._errors: Dict[str, OSError] = {}
        self.reads: List[str] = []

    def add(self, path: str, text: str) -> None:
        self._files[path] = text

    def fail(self, path: str, error: OSError) -> None:
        """Make every read of ``path`` raise ``error``."""
        self._errors[path] = error

    def read(self, path: str) -> Optional[str]:
        self.reads.append(path)
        if path in self._errors:
            raise self._errors[path]
        return self._files.get(path)

    async def read_async(self, path: str) -> Optional[str]:
        return self.read(path)

    def locate(self, path: str) -> str:
        return path


__all__ = ["SourceReader", "FileSourceReader", "MemorySourceReader"]
