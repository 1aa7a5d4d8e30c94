"""Search orchestration across multiple torrent search providers."""

import asyncio
import math
from enum import Enum

from ..util.log import get_logger, log_time_async
from .aggregate import merge
from .client import ProviderClient
from .models import (
    ProviderSet,
    SearchMode,
    SearchRequest,
    TorrentRecord,
)
from .normalize import normalize_all

logger = get_logger()


class SearchState(Enum):
    IDLE = "idle"
    QUERYING = "querying"
    EXHAUSTED = "exhausted"
    SUCCEEDED = "succeeded"


def fallback_order(
    provider_set: ProviderSet, start: str | None = None
) -> list[str]:
    """Provider trial order: start provider first, then the set in order."""
    if not start:
        return list(provider_set)
    return [start] + [p for p in provider_set if p != start]


def per_provider_limit(row_limit: int, provider_count: int) -> int:
    """Row limit for each provider of a parallel search."""
    return math.ceil(row_limit / max(provider_count, 1))


class SearchOrchestrator:
    """Coordinates provider calls for one search request.

    Two strategies are supported:
    - fixed with fallback: providers are tried one after another, a
      provider that fails or finds nothing is dropped and the next one
      is tried with the same request
    - all providers in parallel: every provider gets a share of the row
      limit, all calls are awaited and successful results are merged

    Provider failures never propagate: they are logged and count as an
    empty result. "Nothing found" is an empty list.

    The client's active provider set is shared state. Before every call
    the orchestrator activates only the target provider and issues the
    call without yielding in between.

    The per-call deadline only stops waiting for a provider. Its worker
    thread keeps running until the provider's request_timeout ends the
    HTTP request, and the event loop waits for such threads at shutdown.
    The CLI gives providers the same value as their request_timeout.
    """

    def __init__(self, client: ProviderClient, provider_timeout: float = 30):
        """Initialize orchestrator.

        Args:
            client: Provider client to search with
            provider_timeout: Deadline for one provider call in seconds,
                              0 or less for no deadline
        """
        self._client = client
        self._timeout = provider_timeout if provider_timeout > 0 else None
        self.state = SearchState.IDLE
        self.current_provider: str | None = None
        self.attempted: list[str] = []

    @log_time_async
    async def search(
        self,
        request: SearchRequest,
        provider_set: ProviderSet,
        mode: SearchMode,
        start: str | None = None,
    ) -> list[TorrentRecord]:
        """Search providers for the request.

        Args:
            request: Query, category and row limit
            provider_set: Providers to search, in priority order
            mode: Search strategy
            start: Provider to try first (fixed mode only)

        Returns:
            Found records, empty list if nothing was found
        """
        self.state = SearchState.IDLE
        self.current_provider = None
        self.attempted = []

        if mode == SearchMode.ALL_PROVIDERS_PARALLEL:
            return await self._search_parallel(request, provider_set)
        return await self._search_with_fallback(request, provider_set, start)

    async def _search_with_fallback(
        self,
        request: SearchRequest,
        provider_set: ProviderSet,
        start: str | None,
    ) -> list[TorrentRecord]:
        candidates = fallback_order(provider_set, start)

        while candidates:
            provider_id = candidates.pop(0)
            self.state = SearchState.QUERYING
            self.current_provider = provider_id
            self.attempted.append(provider_id)

            records = await self._query(
                provider_id, request, request.row_limit
            )
            if records:
                self.state = SearchState.SUCCEEDED
                return records[: request.row_limit]

            if candidates:
                logger.info(
                    f"Nothing found via {provider_id}, "
                    f"falling back to {candidates[0]}"
                )

        self.state = SearchState.EXHAUSTED
        self.current_provider = None
        return []

    async def _search_parallel(
        self, request: SearchRequest, provider_set: ProviderSet
    ) -> list[TorrentRecord]:
        if not provider_set:
            self.state = SearchState.EXHAUSTED
            return []

        limit = per_provider_limit(request.row_limit, len(provider_set))
        self.state = SearchState.QUERYING
        self.attempted = list(provider_set)

        results = await asyncio.gather(
            *(self._query(p, request, limit) for p in provider_set),
            return_exceptions=True,
        )

        found = []
        for provider_id, result in zip(provider_set, results):
            if isinstance(result, BaseException):
                logger.warning(f"Search via {provider_id} failed: {result}")
                continue
            found.append(result)

        records = merge(found, request.row_limit)
        self.state = (
            SearchState.SUCCEEDED if records else SearchState.EXHAUSTED
        )
        return records

    async def _query(
        self, provider_id: str, request: SearchRequest, limit: int
    ) -> list[TorrentRecord]:
        """Query one provider, any failure gives an empty result."""
        try:
            self._client.activate([provider_id])
            pending = self._client.search(
                request.query, request.category, limit
            )
            raws = await asyncio.wait_for(pending, timeout=self._timeout)
            records = normalize_all(raws, provider_id)
        except asyncio.TimeoutError:
            logger.warning(
                f"Search via {provider_id} timed out after {self._timeout}s"
            )
            return []
        except Exception as e:
            logger.info(f"Search via {provider_id} failed: {e}")
            return []

        logger.info(
            f"Found {len(records)} results via {provider_id} "
            f'for "{request.query}"'
        )
        return records
