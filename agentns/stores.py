"""Key-value stores backing the env namespace."""

from __future__ import annotations

import os
from typing import MutableMapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """External string store; ``get`` returns None for absent keys."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class EnvironmentStore:
    """The process environment.

    Shared by every interpreter in the process and not locked; concurrent
    interpreters writing the same keys race.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> Optional[str]:
        return self._environ.get(key)

    def set(self, key: str, value: str) -> None:
        if not key or "=" in key or "\x00" in key or "\x00" in value:
            raise ValueError(f"Invalid environment assignment for key {key!r}")
        self._environ[key] = value


class MemoryStore:
    """In-memory store, used by the API server and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
