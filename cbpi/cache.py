"""In-memory cache with per-entry time-to-live.

Expired entries are dropped lazily: when read, and in a sweep on every
write and listing.  There is no size bound.
"""

from __future__ import annotations

import time
from typing import Any, Callable

from cbpi.config import CACHE_TTL_SECONDS


class TTLCache:
    """Map-backed cache whose entries expire after a number of seconds.

    Parameters
    ----------
    default_ttl:
        Lifetime used when :meth:`set` is not given one.
    clock:
        Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        default_ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, expiry = entry
        if self._clock() > expiry:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + lifetime)
        self._sweep()

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def has(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def keys(self) -> list[str]:
        self._sweep()
        return list(self._entries)

    def size(self) -> int:
        self._sweep()
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        self._sweep()
        return {"size": len(self._entries), "keys": list(self._entries)}

    def _sweep(self) -> None:
        now = self._clock()
        expired = [k for k, (_, expiry) in self._entries.items() if now > expiry]
        for key in expired:
            del self._entries[key]
