"""ResultCache: per-target QueryResults with a read-time freshness window."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from .types import DEFAULT_REFRESH_INTERVAL, QueryResult

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A stored QueryResult and the time it was fetched."""

    result: QueryResult
    fetched_at: datetime

    def is_fresh(self, now: datetime, window: timedelta) -> bool:
        return now - self.fetched_at < window


class ResultCache:
    """
    In-memory map of target identifier to its last QueryResult.
    Entries are never expired proactively; staleness is evaluated on read and a
    later put overwrites in place (last write wins).
    """

    def __init__(
        self,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if refresh_interval < 0:
            raise ValueError(f"refresh_interval must be >= 0, got {refresh_interval}")
        self._window = timedelta(seconds=refresh_interval)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, target_id: str) -> QueryResult | None:
        """Return the cached result for target_id if fresh; stale entries are kept but not returned."""
        entry = self._entries.get(target_id)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self._window):
            logger.debug("Cache entry for %s is stale", target_id)
            return None
        return entry.result

    def put(self, target_id: str, result: QueryResult) -> None:
        """Store result for target_id, replacing any prior entry."""
        self._entries[target_id] = CacheEntry(result=result, fetched_at=result.fetched_at)

    def is_fresh(self, target_id: str) -> bool:
        return self.get(target_id) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def refresh_interval(self) -> float:
        return self._window.total_seconds()
