"""Abstract base class for torrent search providers."""

from abc import ABC, abstractmethod

from .models import Category, MagnetError, RawRecord
from .util import TRACKERS, build_magnet_link


class BaseSearchProvider(ABC):
    """Abstract base class for torrent search providers.

    Each provider implements search functionality for a specific
    public tracker or torrent search engine. Calls are blocking,
    ProviderClient runs them off the event loop.

    request_timeout bounds every HTTP request of the provider in seconds.
    """

    request_timeout: float = 30

    @property
    @abstractmethod
    def id(self) -> str:
        """Return unique provider identifier for internal use.

        Returns:
            Unique string identifier (e.g., 'yts', 'tpb')
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    def search(
        self, query: str, category: Category, limit: int
    ) -> list[RawRecord]:
        """Provider-specific search implementation.

        Args:
            query: Search term
            category: Category to search in
            limit: Maximum number of records to return

        Returns:
            List of raw records, at most limit long

        Raises:
            ProviderError: If search fails
        """
        pass

    def get_magnet(self, record: RawRecord) -> str:
        """Resolve magnet link for a raw record returned by search().

        Raises:
            MagnetError: If record carries neither magnet nor info hash
        """
        magnet = record.get("magnet")
        if magnet:
            return magnet

        info_hash = record.get("info_hash")
        if info_hash:
            return build_magnet_link(
                info_hash, record.get("title", ""), TRACKERS
            )

        raise MagnetError(f"No magnet link for: {record.get('title')}")
