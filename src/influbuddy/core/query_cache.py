"""Client-side query cache.

Holds REST responses under hierarchical keys (tuples) so that mutations can
invalidate whole families of queries at once: invalidating
`campaign_keys.lists()` marks every campaign list stale while leaving the
detail entries untouched.

Defaults match the app's query client: data stays fresh for five minutes
(`stale_time=300`), entries nobody read for thirty minutes are dropped
(`gc_time=1800`), and a fetch that fails with a transient backend error is
retried once. Concurrent fetches of the same key share one in-flight request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Hashable

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from influbuddy.core.errors import ApiError

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]


class QueryKeys:
    """Key factory for one resource (`campaigns`, `partners`)."""

    def __init__(self, resource: str) -> None:
        self.all: QueryKey = (resource,)

    def lists(self) -> QueryKey:
        return (*self.all, "list")

    def list(self, filters: str) -> QueryKey:
        return (*self.lists(), ("filters", filters))

    def details(self) -> QueryKey:
        return (*self.all, "detail")

    def detail(self, item_id: str) -> QueryKey:
        return (*self.details(), item_id)


campaign_keys = QueryKeys("campaigns")
partner_keys = QueryKeys("partners")


def key_matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


def is_transient_error(exc: BaseException) -> bool:
    """Unreachable backend, rate limit or server error; worth one more try."""

    if not isinstance(exc, ApiError):
        return False
    status = exc.status_code
    return status is None or status == 429 or status >= 500


@dataclass
class _Entry:
    data: Any
    updated_at: float
    last_access: float
    invalidated: bool = False


@dataclass
class QueryCache:
    stale_time: float = 300.0
    gc_time: float = 1800.0
    retries: int = 1
    retry_delay: float = 1.0
    clock: Callable[[], float] = time.monotonic
    _entries: dict[QueryKey, _Entry] = field(default_factory=dict, init=False, repr=False)
    _inflight: dict[QueryKey, asyncio.Future] = field(default_factory=dict, init=False, repr=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return True
        if entry.invalidated:
            return True
        return self.clock() - entry.updated_at >= self.stale_time

    def get(self, key: QueryKey) -> Any | None:
        """Return cached data (fresh or stale) without fetching."""

        entry = self._entries.get(key)
        if entry is None:
            return None
        entry.last_access = self.clock()
        return entry.data

    def set(self, key: QueryKey, data: Any) -> None:
        now = self.clock()
        self._entries[key] = _Entry(data=data, updated_at=now, last_access=now)

    async def fetch(self, key: QueryKey, fn: Callable[[], Awaitable[Any]]) -> Any:
        """Return fresh cached data for `key`, or await `fn` and store the result."""

        self.collect_garbage()
        if not self.is_stale(key):
            logger.debug("cache hit %s", key)
            return self.get(key)

        pending = self._inflight.get(key)
        if pending is not None:
            return await asyncio.shield(pending)

        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._inflight[key] = future
        try:
            data = await self._fetch_with_retry(key, fn)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so an unawaited failure is not reported by asyncio.
            future.exception()
            raise
        else:
            self.set(key, data)
            future.set_result(data)
            return data
        finally:
            self._inflight.pop(key, None)

    async def _fetch_with_retry(self, key: QueryKey, fn: Callable[[], Awaitable[Any]]) -> Any:
        if self.retries <= 0:
            return await fn()

        @retry(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=self.retry_delay, max=30),
            retry=retry_if_exception(is_transient_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def _attempt() -> Any:
            return await fn()

        try:
            return await _attempt()
        except ApiError as exc:
            logger.debug("query %s failed: %s", key, exc)
            raise

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry under `prefix` stale; returns how many were marked."""

        count = 0
        for key, entry in self._entries.items():
            if key_matches(key, prefix):
                entry.invalidated = True
                count += 1
        logger.debug("invalidated %d queries under %s", count, prefix)
        return count

    def remove(self, prefix: QueryKey) -> int:
        keys = [key for key in self._entries if key_matches(key, prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def collect_garbage(self) -> None:
        now = self.clock()
        expired = [
            key for key, entry in self._entries.items() if now - entry.last_access > self.gc_time
        ]
        for key in expired:
            del self._entries[key]
