"""Time-to-live cache for filed flight plans.

Plans are fetched lazily per flight and kept for a few minutes. Concurrent
requests for the same flight share a single in-flight fetch, and failures are
never cached so the next request retries.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import AsyncIterator, Awaitable, Callable, Iterable, Optional

from livefleet.models.live import RoutePlan

logger = logging.getLogger("livefleet.plan_cache")

RoutePlanFetcher = Callable[[str], Awaitable[Optional[RoutePlan]]]
PlanCallback = Callable[[str, Optional[RoutePlan]], None]

DEFAULT_PLAN_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class RoutePlanCacheEntry:
    plan: RoutePlan
    cached_at: float


class RoutePlanCache:
    """Per-flight plan cache with deduplicated concurrent fills."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_PLAN_TTL_SECONDS,
        *,
        fetch_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.fetch_timeout = fetch_timeout
        self._clock = clock
        self._entries: dict[str, RoutePlanCacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

        self._hits = 0
        self._misses = 0

    def _fresh_entry(self, flight_id: str) -> RoutePlanCacheEntry | None:
        entry = self._entries.get(flight_id)
        if entry is None:
            return None
        if self._clock() - entry.cached_at < self.ttl_seconds:
            return entry
        del self._entries[flight_id]
        return None

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [
            flight_id
            for flight_id, entry in self._entries.items()
            if now - entry.cached_at >= self.ttl_seconds
        ]
        for flight_id in expired:
            del self._entries[flight_id]
        if expired:
            logger.debug("Evicted %s expired flight plans", len(expired))

    def peek(self, flight_id: str) -> RoutePlan | None:
        """Return a cached plan without fetching."""

        entry = self._fresh_entry(flight_id)
        return entry.plan if entry else None

    async def get_or_fetch(
        self, flight_id: str, fetcher: RoutePlanFetcher
    ) -> RoutePlan | None:
        """Return the cached plan or fetch it, ``None`` when unavailable."""

        async with self._lock:
            entry = self._fresh_entry(flight_id)
            if entry is not None:
                self._hits += 1
                return entry.plan

            self._misses += 1
            self._evict_expired()
            task = self._inflight.get(flight_id)
            if task is None:
                task = asyncio.create_task(self._fill(flight_id, fetcher))
                self._inflight[flight_id] = task
            else:
                logger.debug("Joining in-flight plan fetch for %s", flight_id)

        return await asyncio.shield(task)

    async def _fill(self, flight_id: str, fetcher: RoutePlanFetcher) -> RoutePlan | None:
        try:
            if self.fetch_timeout:
                plan = await asyncio.wait_for(fetcher(flight_id), self.fetch_timeout)
            else:
                plan = await fetcher(flight_id)
        except asyncio.TimeoutError:
            logger.warning("Flight plan fetch for %s timed out", flight_id)
            return None
        except Exception as exc:
            logger.warning("Flight plan fetch for %s failed: %s", flight_id, exc)
            return None
        finally:
            self._inflight.pop(flight_id, None)

        if plan is not None:
            self._entries[flight_id] = RoutePlanCacheEntry(plan=plan, cached_at=self._clock())
        return plan

    async def iter_completed(
        self, flight_ids: Iterable[str], fetcher: RoutePlanFetcher
    ) -> AsyncIterator[tuple[str, Optional[RoutePlan]]]:
        """Yield ``(flight_id, plan)`` pairs in completion order.

        Every unique id is fetched concurrently; the order of results is not
        related to the order of ``flight_ids``.
        """

        async def fetch_one(flight_id: str) -> tuple[str, Optional[RoutePlan]]:
            return flight_id, await self.get_or_fetch(flight_id, fetcher)

        unique_ids = list(dict.fromkeys(flight_ids))
        for next_result in asyncio.as_completed([fetch_one(fid) for fid in unique_ids]):
            yield await next_result

    async def fetch_missing(
        self,
        flight_ids: Iterable[str],
        fetcher: RoutePlanFetcher,
        on_result: PlanCallback | None = None,
    ) -> dict[str, Optional[RoutePlan]]:
        """Fetch plans for ``flight_ids`` and wait until every fetch settled."""

        results: dict[str, Optional[RoutePlan]] = {}
        async for flight_id, plan in self.iter_completed(flight_ids, fetcher):
            results[flight_id] = plan
            if on_result is not None:
                on_result(flight_id, plan)
        logger.debug(
            "Fetched %s flight plans (%s available)",
            len(results),
            sum(1 for plan in results.values() if plan is not None),
        )
        return results

    def invalidate(self, flight_id: str) -> None:
        self._entries.pop(flight_id, None)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def stats(self) -> dict:
        lookups = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "in_flight": len(self._inflight),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / lookups if lookups > 0 else 0,
        }


__all__ = [
    "DEFAULT_PLAN_TTL_SECONDS",
    "PlanCallback",
    "RoutePlanCache",
    "RoutePlanCacheEntry",
    "RoutePlanFetcher",
]
