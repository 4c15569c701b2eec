"""Result cache -- TTL-bounded memoisation of computed graphs.

The pipeline receives a cache instance instead of reaching for a module
global, so tests can hand it a fresh :class:`TTLCache` with a fake clock.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .models import FlowchartResult

DEFAULT_TTL = 3600.0


def cache_key(owner: str, repo: str) -> str:
    """Key for one repository. The branch is deliberately not part of it."""
    return f"flowchart:{owner}/{repo}"


@runtime_checkable
class ResultCache(Protocol):
    def get(self, key: str) -> FlowchartResult | None:
        ...

    def set(self, key: str, value: FlowchartResult, ttl: float | None = None) -> None:
        ...


class TTLCache:
    """Thread-safe in-memory cache with per-entry expiry.

    Parameters
    ----------
    ttl:
        Default lifetime in seconds for entries written without an explicit ttl.
    clock:
        Monotonic time source; injectable for tests.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, FlowchartResult]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> FlowchartResult | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: FlowchartResult, ttl: float | None = None) -> None:
        lifetime = self._ttl if ttl is None else ttl
        entry = (self._clock() + lifetime, value)
        # Single assignment: readers see the old entry or the complete new one.
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
