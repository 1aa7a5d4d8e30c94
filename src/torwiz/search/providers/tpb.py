"""The Pirate Bay torrent search provider implementation."""

import urllib.parse
from datetime import datetime
from typing import Any

from ...util.log import log_time
from ...util.print import print_size
from ..base import BaseSearchProvider
from ..models import Category, RawRecord
from ..util import TRACKERS, build_magnet_link, fetch_json


class TPBProvider(BaseSearchProvider):
    """Search provider for The Pirate Bay (via apibay.org)."""

    API_URL = "https://apibay.org/q.php"
    TOP100_URL = "https://apibay.org/precompiled/data_top100_all.json"

    # Category to TPB category code, 0 searches everything
    CATEGORY_MAP = {
        Category.ALL: 0,
        Category.MOVIES: 201,
        Category.TV: 205,
        Category.MUSIC: 101,
        Category.GAMES: 400,
        Category.APPS: 300,
        Category.BOOKS: 601,
    }

    @property
    def id(self) -> str:
        return "tpb"

    @property
    def name(self) -> str:
        return "The Pirate Bay"

    @log_time
    def search(
        self, query: str, category: Category, limit: int
    ) -> list[RawRecord]:
        """Search The Pirate Bay for torrents.

        Top100 category loads the precompiled top list and keeps entries
        whose title contains every word of the query.

        Raises:
            ProviderError: If API request fails
        """
        if not query or not query.strip():
            return []

        if category == Category.TOP100:
            data = fetch_json(
                self.TOP100_URL, timeout=self.request_timeout
            )
            words = query.lower().split()
            data = [
                t
                for t in data or []
                if all(w in str(t.get("name", "")).lower() for w in words)
            ]
        else:
            params = {
                "q": query.strip(),
                "cat": self.CATEGORY_MAP.get(category, 0),
            }
            url = f"{self.API_URL}?{urllib.parse.urlencode(params)}"
            data = fetch_json(url, timeout=self.request_timeout)

        # API returns [{"name": "No results returned"}] when no results
        if not data or (
            len(data) == 1 and data[0].get("name") == "No results returned"
        ):
            return []

        results = []
        for torrent in data:
            record = self._parse_torrent(torrent)
            if record:
                results.append(record)
            if len(results) >= limit:
                break

        return results

    def _parse_torrent(self, torrent: dict[str, Any]) -> RawRecord | None:
        """Parse a single torrent from TPB API response."""
        try:
            title = torrent.get("name")
            info_hash = torrent.get("info_hash")
            if not title or not info_hash:
                return None

            record = {
                "title": title,
                "info_hash": info_hash,
                "magnet": build_magnet_link(info_hash, title, TRACKERS),
                "seeds": int(torrent.get("seeders")),
                "peers": int(torrent.get("leechers")),
                "size": print_size(int(torrent.get("size")), size_bytes=1024),
            }

            added = torrent.get("added")
            if added:
                record["time"] = datetime.fromtimestamp(int(added))

            torrent_id = torrent.get("id")
            if torrent_id:
                record["link"] = (
                    f"https://thepiratebay.org/description.php?id={torrent_id}"
                )

            username = torrent.get("username")
            if username:
                status = torrent.get("status")
                record["desc"] = f"Uploaded by {username}" + (
                    f" ({status})" if status and status != "member" else ""
                )

            return record

        except (KeyError, ValueError, TypeError):
            return None
