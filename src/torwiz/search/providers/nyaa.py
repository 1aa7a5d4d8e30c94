"""Nyaa.si torrent search provider implementation."""

import urllib.parse
import xml.etree.ElementTree as ET

from ...util.log import log_time
from ..base import BaseSearchProvider
from ..models import Category, ProviderError, RawRecord
from ..util import build_magnet_link, fetch_text


class NyaaProvider(BaseSearchProvider):
    """Search provider for Nyaa.si (anime torrents).

    Nyaa.si provides an RSS feed with custom XML namespace for searching.
    The feed includes seeders, leechers, and other metadata.
    """

    RSS_URL = "https://nyaa.si/?page=rss"
    NAMESPACES = {"nyaa": "https://nyaa.si/xmlns/nyaa"}

    # Common public trackers for anime torrents
    TRACKERS = [
        "udp://tracker.opentrackr.org:1337/announce",
        "udp://open.stealth.si:80/announce",
        "udp://tracker.torrent.eu.org:451/announce",
        "udp://exodus.desync.com:6969/announce",
        "http://nyaa.tracker.wf:7777/announce",
    ]

    CATEGORY_MAP = {
        Category.MOVIES: "4_0",  # Live Action
        Category.TV: "1_0",  # Anime
        Category.MUSIC: "2_0",  # Audio
        Category.BOOKS: "3_0",  # Literature
        Category.APPS: "6_1",  # Software - Applications
        Category.GAMES: "6_2",  # Software - Games
    }

    @property
    def id(self) -> str:
        return "nyaa"

    @property
    def name(self) -> str:
        return "Nyaa"

    @log_time
    def search(
        self, query: str, category: Category, limit: int
    ) -> list[RawRecord]:
        """Search Nyaa.si for torrents via RSS feed.

        Raises:
            ProviderError: If RSS request fails
        """
        if not query or not query.strip():
            return []

        params = {"q": query.strip()}
        if category in self.CATEGORY_MAP:
            params["c"] = self.CATEGORY_MAP[category]
        if category == Category.TOP100:
            params["s"] = "seeders"
            params["o"] = "desc"

        url = f"{self.RSS_URL}&{urllib.parse.urlencode(params)}"
        data = fetch_text(url, timeout=self.request_timeout)

        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise ProviderError(f"Failed to parse RSS feed: {e}") from e

        results = []
        for item in root.findall(".//item"):
            record = self._parse_item(item)
            if record:
                results.append(record)
            if len(results) >= limit:
                break

        return results

    def _text(self, item: ET.Element, path: str) -> str | None:
        elem = item.find(path, self.NAMESPACES)
        if elem is None or not elem.text:
            return None
        return elem.text.strip()

    def _parse_item(self, item: ET.Element) -> RawRecord | None:
        """Parse a single RSS item from Nyaa feed."""
        title = self._text(item, "title")
        info_hash = self._text(item, "nyaa:infoHash")
        if not title or not info_hash:
            return None

        record = {
            "title": title,
            "info_hash": info_hash,
            "magnet": build_magnet_link(
                info_hash, title, trackers=self.TRACKERS
            ),
            "seeds": self._text(item, "nyaa:seeders"),
            "peers": self._text(item, "nyaa:leechers"),
            "size": self._text(item, "nyaa:size"),
            "time": self._text(item, "pubDate"),
            "link": self._text(item, "guid"),
        }

        category = self._text(item, "nyaa:category")
        if category:
            record["desc"] = category

        return record
