"""In-process summary cache with lazy expiry and a periodic sweep."""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from orgwatch.data import CachedSummary
from orgwatch.query.heuristic import utc_now

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_SWEEP_INTERVAL = 300.0


class SummaryCache:
    """Time-boxed map from article id to generated summary.

    Expired entries are never returned: ``get`` removes them on read, and a
    background sweep evicts the rest every ``sweep_interval`` seconds while
    started. Access is serialized by a lock so the cache can be shared by
    concurrent requests and worker threads. The lock is exclusive rather than
    reader/writer because ``get`` evicts, so every read may write.

    Args:
        ttl: Default lifetime of an entry.
        sweep_interval: Seconds between background sweeps.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(
        self,
        *,
        ttl: timedelta = DEFAULT_TTL,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._ttl = ttl
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[str, CachedSummary] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def get(self, article_id: str) -> CachedSummary | None:
        with self._lock:
            entry = self._entries.get(article_id)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[article_id]
                return None
            return entry

    def set(
        self,
        article_id: str,
        summary: str,
        *,
        original_title: str,
        source_url: str,
        ttl: timedelta | None = None,
    ) -> CachedSummary:
        now = self._clock()
        entry = CachedSummary(
            article_id=article_id,
            summary=summary,
            original_title=original_title,
            source_url=source_url,
            cached_at=now,
            expires_at=now + (ttl if ttl is not None else self._ttl),
        )
        with self._lock:
            self._entries[article_id] = entry
        return entry

    def delete(self, article_id: str) -> None:
        with self._lock:
            self._entries.pop(article_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Evict every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, v in self._entries.items() if v.is_expired(now)]
            for article_id in expired:
                del self._entries[article_id]
        if expired:
            logger.debug("Evicted %d expired summaries", len(expired))
        return len(expired)

    def stats(self) -> dict[str, int]:
        now = self._clock()
        with self._lock:
            total = len(self._entries)
            expired = sum(1 for v in self._entries.values() if v.is_expired(now))
        return {
            "total_entries": total,
            "expired_entries": expired,
            "active_entries": total - expired,
        }

    def start(self) -> None:
        """Start the background sweep on the running event loop."""
        if self.running:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()
