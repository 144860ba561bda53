"""
In-memory response cache and in-flight request de-duplication.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from yqpaynow.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ResponseCache:
    """TTL cache keyed by request.

    Entries expire by wall clock; expired entries are evicted when read.
    There is no size bound.

    Attributes:
        default_ttl: Lifetime in seconds used when ``set`` gets no ``ttl``
    """

    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.time) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """
        Drop ``prefix`` and every key below it; returns how many were removed.

        Matching is per path segment: ``/roles`` covers ``/roles/5`` and
        ``/roles?theater_id=1`` but not ``/roles-archive``.
        """
        base = prefix.rstrip("/")
        doomed = [key for key in self._entries if key == base or key.startswith((base + "/", base + "?"))]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class RequestDeduplicator:
    """Share one in-flight request between concurrent callers of the same key.

    The entry is dropped as soon as the request finishes, whether it
    succeeded or failed, so later calls start a fresh request.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Task] = {}

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    async def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug(f"Joining in-flight request {key}")
        return await asyncio.shield(task)
