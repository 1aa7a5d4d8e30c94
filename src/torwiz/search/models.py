from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Category(Enum):
    """Search categories understood by every provider."""

    ALL = "All"
    MOVIES = "Movies"
    TV = "TV"
    MUSIC = "Music"
    GAMES = "Games"
    APPS = "Apps"
    BOOKS = "Books"
    TOP100 = "Top100"

    @classmethod
    def from_name(cls, name: str | None) -> "Category":
        """Get category by its display name (case-insensitive).

        Raises:
            ValueError: If the name is not a known category
        """
        if not name:
            return cls.ALL

        for category in cls:
            if category.value.lower() == name.lower():
                return category
        raise ValueError(f"Unknown category: {name}")

    @classmethod
    def names(cls) -> list[str]:
        return [c.value for c in cls]


class SearchMode(Enum):
    FIXED_WITH_FALLBACK = "fixed"
    ALL_PROVIDERS_PARALLEL = "all"


class ProviderError(Exception):
    """A single provider call failed (network, parse or API error)."""


class MagnetError(Exception):
    """Magnet link could not be resolved for a record."""


# Raw provider output: plain dict with optional keys title, size, seeds,
# peers, time, desc, link, magnet, info_hash
RawRecord = dict[str, Any]

ProviderSet = tuple[str, ...]


@dataclass(frozen=True)
class SearchRequest:
    query: str
    category: Category = Category.ALL
    row_limit: int = 30
    truncate_width: int = 40

    def __post_init__(self):
        query = (self.query or "").strip()
        if not query:
            raise ValueError("Search query cannot be empty")
        if self.row_limit < 1:
            raise ValueError(f"Row limit must be positive: {self.row_limit}")
        if self.truncate_width < 1:
            raise ValueError(
                f"Truncate width must be positive: {self.truncate_width}"
            )
        object.__setattr__(self, "query", query)


@dataclass(frozen=True)
class TorrentRecord:
    """Normalized search result tagged with its source provider.

    Optional fields are None when the provider did not report them.
    magnet_ref is the raw provider record, resolved to a magnet link
    on demand.
    """

    title: str
    provider: str
    magnet_ref: RawRecord

    size_text: str | None = None
    seeds: int | None = None
    peers: int | None = None
    uploaded_at: datetime | str | None = None
    description: str | None = None
    detail_link: str | None = None
