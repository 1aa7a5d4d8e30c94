"""Torrent search functionality."""

from .aggregate import merge
from .base import BaseSearchProvider
from .client import (
    ProviderClient,
    parse_provider_set,
    print_available_providers,
)
from .manager import SearchOrchestrator, SearchState
from .models import (
    Category,
    MagnetError,
    ProviderError,
    SearchMode,
    SearchRequest,
    TorrentRecord,
)
from .normalize import normalize, normalize_all

__all__ = [
    "BaseSearchProvider",
    "Category",
    "MagnetError",
    "ProviderClient",
    "ProviderError",
    "SearchMode",
    "SearchOrchestrator",
    "SearchRequest",
    "SearchState",
    "TorrentRecord",
    "merge",
    "normalize",
    "normalize_all",
    "parse_provider_set",
    "print_available_providers",
]
