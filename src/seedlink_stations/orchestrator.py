"""QueryOrchestrator: resolve a batch of targets from the cache or a live handshake, one at a time."""

import logging
from typing import Callable, Protocol, Sequence

from .cache import ResultCache
from .client import SeedLinkClient
from .types import DEFAULT_TIMEOUT, QueryResult, Target

logger = logging.getLogger(__name__)


class StationFetcher(Protocol):
    async def fetch(self) -> QueryResult: ...


ClientFactory = Callable[[Target, float], StationFetcher]


def _default_client(target: Target, timeout: float) -> StationFetcher:
    return SeedLinkClient(target, timeout=timeout)


class QueryOrchestrator:
    """
    Resolves every target of a batch to exactly one QueryResult.

    Targets run strictly in sequence: a handshake starts only after the previous
    one reached a terminal state. Fresh cache entries are returned without any
    network activity; live results are written back to the cache. The batch is
    returned only once every target has resolved, in input order.
    """

    def __init__(
        self,
        cache: ResultCache,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: ClientFactory = _default_client,
    ) -> None:
        self._cache = cache
        self._timeout = timeout
        self._client_factory = client_factory

    @property
    def cache(self) -> ResultCache:
        return self._cache

    async def run(self, targets: Sequence[Target]) -> list[QueryResult]:
        results: list[QueryResult] = []
        for target in targets:
            results.append(await self._resolve(target))
        return results

    async def _resolve(self, target: Target) -> QueryResult:
        cached = self._cache.get(target.identifier)
        if cached is not None:
            logger.debug("Cache hit for %s", target.identifier)
            return cached
        logger.debug("Querying %s:%d", target.host, target.port)
        result = await self._client_factory(target, self._timeout).fetch()
        self._cache.put(target.identifier, result)
        if result.error is not None:
            logger.info("Query of %s failed: %s", target.identifier, result.error.value)
        return result
