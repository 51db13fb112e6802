"""Environment stores that loaded values can be exported into.

The loader only needs three operations, so tests can swap the process
environment for a plain dictionary.
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, MutableMapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class Environment(Protocol):
    """Protocol for environment stores."""

    def get(self, key: str) -> Optional[str]:
        """Return the value of ``key``, or None when it is not defined."""
        ...

    def set(self, key: str, value: str) -> None:
        """Define ``key``, replacing any previous value."""
        ...

    def to_dict(self) -> Dict[str, str]:
        """Return a snapshot of every defined variable."""
        ...


class OsEnvironment:
    """The process environment (``os.environ``).

    Changes are visible to the whole process and to child processes started
    afterwards.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self._environ = environ

    @property
    def environ(self) -> MutableMapping[str, str]:
        # Looked up on every access so patched os.environ objects are honoured
        return os.environ if self._environ is None else self._environ

    def get(self, key: str) -> Optional[str]:
        return self.environ.get(key)

    def set(self, key: str, value: str) -> None:
        self.environ[key] = value

    def to_dict(self) -> Dict[str, str]:
        return dict(self.environ)


class MemoryEnvironment:
    """Dictionary-backed environment.

    Example:
        env = MemoryEnvironment({"HOME": "/root"})
        DotenvLoader(environment=env).load(export=True)
        env.to_dict()
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._store: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def to_dict(self) -> Dict[str, str]:
        return self._store.copy()

    def clear(self) -> None:
        self._store.clear()


__all__ = ["Environment", "OsEnvironment", "MemoryEnvironment"]
