"""Provider registry with shared enable/disable state."""

import asyncio
from collections.abc import Awaitable

from ..util.log import get_logger
from .base import BaseSearchProvider
from .models import (
    Category,
    MagnetError,
    ProviderError,
    ProviderSet,
    RawRecord,
    TorrentRecord,
)
from .providers import (
    NyaaProvider,
    TorrentsCsvProvider,
    TPBProvider,
    YTSProvider,
)

logger = get_logger()

# Available provider IDs
AVAILABLE_PROVIDERS = {
    "tpb": TPBProvider,
    "yts": YTSProvider,
    "nyaa": NyaaProvider,
    "torrentscsv": TorrentsCsvProvider,
}

# Default provider order (used when no providers are configured)
DEFAULT_PROVIDER_ORDER = ("tpb", "yts", "torrentscsv", "nyaa")


def parse_provider_set(provider_ids: list[str] | None) -> ProviderSet:
    """Validate provider IDs and drop duplicates, preserving order.

    Args:
        provider_ids: List of provider IDs, or None for the default order

    Raises:
        ValueError: If unknown provider ID is specified
    """
    if not provider_ids:
        return DEFAULT_PROVIDER_ORDER

    unknown = [p for p in provider_ids if p not in AVAILABLE_PROVIDERS]
    if unknown:
        raise ValueError(
            f"Unknown search provider(s): {', '.join(unknown)}. "
            f"Available providers: "
            f"{', '.join(sorted(AVAILABLE_PROVIDERS.keys()))}"
        )

    return tuple(dict.fromkeys(provider_ids))


def print_available_providers() -> None:
    """Print list of all available search providers to stdout.

    Providers are listed in default order.
    """
    print("Available search providers (default order):")
    for provider_id in DEFAULT_PROVIDER_ORDER:
        provider = AVAILABLE_PROVIDERS[provider_id]()
        print(f"  - {provider_id}: {provider.name}")


class ProviderClient:
    """Search capability over a set of providers.

    Like a torrent search SDK, the client keeps a global set of enabled
    providers: search() and get_magnet() only talk to enabled ones.
    Callers must activate() the providers they want before each call.
    """

    def __init__(
        self,
        providers: list[BaseSearchProvider] | None = None,
        request_timeout: float = 0,
    ):
        """Initialize client.

        Args:
            providers: Provider instances, all available ones if None
            request_timeout: HTTP timeout for every provider in seconds,
                             0 or less keeps the providers' own timeout
        """
        if providers is None:
            providers = [
                AVAILABLE_PROVIDERS[p]() for p in DEFAULT_PROVIDER_ORDER
            ]
        if request_timeout > 0:
            for provider in providers:
                provider.request_timeout = request_timeout
        self._providers = {p.id: p for p in providers}
        self._enabled: list[str] = []

    @property
    def provider_ids(self) -> ProviderSet:
        return tuple(self._providers)

    @property
    def active_providers(self) -> ProviderSet:
        return tuple(self._enabled)

    def provider_name(self, provider_id: str) -> str:
        provider = self._providers.get(provider_id)
        return provider.name if provider else provider_id

    def enable_provider(self, provider_id: str) -> None:
        if provider_id not in self._providers:
            raise ValueError(f"Unknown search provider: {provider_id}")
        if provider_id not in self._enabled:
            self._enabled.append(provider_id)

    def disable_all_providers(self) -> None:
        self._enabled = []

    def activate(self, provider_ids) -> None:
        """Enable exactly the given providers, disabling all others."""
        self.disable_all_providers()
        for provider_id in provider_ids:
            self.enable_provider(provider_id)

    def search(
        self, query: str, category: Category, limit: int
    ) -> Awaitable[list[RawRecord]]:
        """Search all active providers.

        The active set is captured when search() is called, not when the
        returned awaitable first runs. A caller that activates and calls
        search() without yielding in between is isolated from other tasks
        changing the active set.

        Raises (when awaited):
            ProviderError: If no provider is active or a provider failed
        """
        providers = [self._providers[p] for p in self._enabled]
        return self._search(providers, query, category, limit)

    async def _search(
        self,
        providers: list[BaseSearchProvider],
        query: str,
        category: Category,
        limit: int,
    ) -> list[RawRecord]:
        if not providers:
            raise ProviderError("No active search providers")

        results = await asyncio.gather(
            *(
                asyncio.to_thread(p.search, query, category, limit)
                for p in providers
            )
        )
        return [record for records in results for record in records]

    async def get_magnet(self, record: TorrentRecord) -> str:
        """Resolve magnet link for a normalized record.

        Raises:
            MagnetError: If magnet could not be resolved
        """
        try:
            self.activate([record.provider])
        except ValueError as e:
            raise MagnetError(str(e)) from e

        provider = self._providers[record.provider]

        try:
            return await asyncio.to_thread(
                provider.get_magnet, record.magnet_ref
            )
        except MagnetError:
            raise
        except Exception as e:
            logger.warning(f"Failed to get magnet from {provider.name}: {e}")
            raise MagnetError(str(e)) from e
