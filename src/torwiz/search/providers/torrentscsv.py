"""TorrentsCSV.com torrent search provider implementation."""

import urllib.parse
from typing import Any

from ...util.log import log_time
from ...util.print import print_size
from ..base import BaseSearchProvider
from ..models import Category, RawRecord
from ..util import TRACKERS, build_magnet_link, fetch_json


class TorrentsCsvProvider(BaseSearchProvider):
    """Search provider for torrents-csv.com (general torrents).

    TorrentsCSV provides a public API for searching torrent metadata.
    It has no categories, so the category is ignored.
    Documentation: https://git.torrents-csv.com/heretic/torrents-csv-server
    """

    API_URL = "https://torrents-csv.com/service/search"

    @property
    def id(self) -> str:
        return "torrentscsv"

    @property
    def name(self) -> str:
        return "Torrents-CSV"

    @log_time
    def search(
        self, query: str, category: Category, limit: int
    ) -> list[RawRecord]:
        if not query or not query.strip():
            return []

        params = {
            "q": query.strip(),
            "size": limit,
        }
        url = f"{self.API_URL}?{urllib.parse.urlencode(params)}"
        data = fetch_json(url, timeout=self.request_timeout)

        results = []
        for torrent in data.get("torrents") or []:
            record = self._parse_torrent(torrent)
            if record:
                results.append(record)

        return results[:limit]

    def _parse_torrent(self, torrent: dict[str, Any]) -> RawRecord | None:
        title = torrent.get("name")
        info_hash = torrent.get("infohash")
        if not title or not info_hash:
            return None

        record = {
            "title": title,
            "info_hash": info_hash,
            "magnet": build_magnet_link(info_hash, title, TRACKERS),
            "seeds": torrent.get("seeders"),
            "peers": torrent.get("leechers"),
            "time": torrent.get("created_unix"),
        }

        size = torrent.get("size_bytes")
        if isinstance(size, int):
            record["size"] = print_size(size)

        return record
