"""YTS torrent search provider implementation."""

import urllib.parse
from typing import Any

from ...util.log import log_time
from ..base import BaseSearchProvider
from ..models import Category, ProviderError, RawRecord
from ..util import build_magnet_link, fetch_json


class YTSProvider(BaseSearchProvider):
    """Search provider for YTS (movie torrents).

    YTS provides a public API for searching movie torrents.
    Documentation: https://yts.lt/api
    """

    DOMAIN = "yts.lt"
    API_URL = f"https://{DOMAIN}/api/v2/list_movies.json"
    MAX_LIMIT = 50

    # Recommended trackers from YTS documentation
    TRACKERS = [
        "udp://open.demonii.com:1337/announce",
        "udp://tracker.openbittorrent.com:80",
        "udp://tracker.coppersurfer.tk:6969",
        "udp://glotorrents.pw:6969/announce",
        "udp://tracker.opentrackr.org:1337/announce",
        "udp://torrent.gresille.org:80/announce",
        "udp://p4p.arenabg.com:1337",
        "udp://tracker.leechers-paradise.org:6969",
    ]

    SUPPORTED_CATEGORIES = (Category.ALL, Category.MOVIES, Category.TOP100)

    @property
    def id(self) -> str:
        return "yts"

    @property
    def name(self) -> str:
        return "YTS"

    @log_time
    def search(
        self, query: str, category: Category, limit: int
    ) -> list[RawRecord]:
        """Search YTS for movie torrents.

        Every quality of a movie is a separate record. Categories other
        than movies give no results.

        Raises:
            ProviderError: If API request fails
        """
        if not query or not query.strip():
            return []

        if category not in self.SUPPORTED_CATEGORIES:
            return []

        params = {
            "query_term": query.strip(),
            "limit": min(limit, self.MAX_LIMIT),
            "sort_by": (
                "download_count" if category == Category.TOP100 else "seeds"
            ),
            "order_by": "desc",
        }
        url = f"{self.API_URL}?{urllib.parse.urlencode(params)}"
        data = fetch_json(url, timeout=self.request_timeout)

        if data.get("status") != "ok":
            raise ProviderError(f"API error: {data.get('status_message')}")

        movies = data.get("data", {}).get("movies") or []

        results = []
        for movie in movies:
            for torrent in movie.get("torrents") or []:
                record = self._parse_torrent(movie, torrent)
                if record:
                    results.append(record)

        return results[:limit]

    def _parse_torrent(
        self, movie: dict[str, Any], torrent: dict[str, Any]
    ) -> RawRecord | None:
        """Parse a single torrent from YTS API response."""
        info_hash = torrent.get("hash")
        title = movie.get("title")
        if not info_hash or not title:
            return None

        full_title = f"{title} ({movie.get('year')})"
        quality = torrent.get("quality")
        if quality:
            full_title += f" [{quality}]"
        language = movie.get("language")
        if language:
            full_title += f" [{language.upper()}]"

        record = {
            "title": full_title,
            "info_hash": info_hash,
            "magnet": build_magnet_link(
                info_hash, full_title, trackers=self.TRACKERS
            ),
            "seeds": torrent.get("seeds"),
            "peers": torrent.get("peers"),
            "size": torrent.get("size"),
            "time": torrent.get("date_uploaded"),
        }

        page_url = movie.get("url")
        if page_url:
            record["link"] = page_url.split("?")[0]
        elif movie.get("id"):
            record["link"] = f"https://{self.DOMAIN}/movies/{movie['id']}"

        if movie.get("summary"):
            record["desc"] = movie["summary"]

        return record
