"""Unit tests for search providers with mocked HTTP responses."""

from datetime import datetime
from unittest.mock import patch

import pytest

from src.torwiz.search.models import Category, MagnetError, ProviderError
from src.torwiz.search.providers import (
    NyaaProvider,
    TorrentsCsvProvider,
    TPBProvider,
    YTSProvider,
)

HASH_A = "a" * 40
HASH_B = "b" * 40


class TestTPBProvider:
    """Tests for The Pirate Bay provider."""

    RESPONSE = [
        {
            "id": "42",
            "name": "Ubuntu 24.04 Desktop",
            "info_hash": HASH_A,
            "seeders": "120",
            "leechers": "5",
            "size": "6000000000",
            "added": "1714000000",
            "username": "canonical",
            "status": "vip",
        },
        {
            "id": "43",
            "name": "Ubuntu 22.04 Server",
            "info_hash": HASH_B,
            "seeders": "10",
            "leechers": "1",
            "size": "2000000000",
            "added": "1650000000",
            "username": "someone",
            "status": "member",
        },
    ]

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_parses_records(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = TPBProvider().search("ubuntu", Category.ALL, 30)

        assert len(records) == 2
        record = records[0]
        assert record["title"] == "Ubuntu 24.04 Desktop"
        assert record["info_hash"] == HASH_A
        assert record["seeds"] == 120
        assert record["peers"] == 5
        assert record["size"] == "5.59 GB"
        assert record["time"] == datetime.fromtimestamp(1714000000)
        assert record["desc"] == "Uploaded by canonical (vip)"
        assert record["link"].endswith("description.php?id=42")
        assert record["magnet"].startswith(f"magnet:?xt=urn:btih:{HASH_A}")
        assert records[1]["desc"] == "Uploaded by someone"

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_category_code_in_url(self, mock_fetch):
        mock_fetch.return_value = []

        TPBProvider().search("dune", Category.MOVIES, 30)

        url = mock_fetch.call_args[0][0]
        assert "q=dune" in url
        assert "cat=201" in url

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_request_timeout_passed_to_http(self, mock_fetch):
        mock_fetch.return_value = []
        provider = TPBProvider()

        provider.search("dune", Category.ALL, 30)
        assert mock_fetch.call_args.kwargs["timeout"] == 30

        provider.request_timeout = 4
        provider.search("dune", Category.TOP100, 30)
        assert mock_fetch.call_args.kwargs["timeout"] == 4

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_no_results_marker(self, mock_fetch):
        mock_fetch.return_value = [
            {"id": "0", "name": "No results returned", "info_hash": "0" * 40}
        ]

        assert TPBProvider().search("zzz", Category.ALL, 30) == []

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_limit(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        assert len(TPBProvider().search("ubuntu", Category.ALL, 1)) == 1

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_invalid_entries_are_skipped(self, mock_fetch):
        broken = dict(self.RESPONSE[0], seeders="many")
        mock_fetch.return_value = [broken, self.RESPONSE[1]]

        records = TPBProvider().search("ubuntu", Category.ALL, 30)

        assert [r["title"] for r in records] == ["Ubuntu 22.04 Server"]

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_top100_filters_by_query_words(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = TPBProvider().search("server ubuntu", Category.TOP100, 30)

        assert mock_fetch.call_args[0][0] == TPBProvider.TOP100_URL
        assert [r["title"] for r in records] == ["Ubuntu 22.04 Server"]

    @patch("src.torwiz.search.providers.tpb.fetch_json")
    def test_provider_error_propagates(self, mock_fetch):
        mock_fetch.side_effect = ProviderError("Network error")

        with pytest.raises(ProviderError):
            TPBProvider().search("ubuntu", Category.ALL, 30)

    def test_empty_query(self):
        assert TPBProvider().search("  ", Category.ALL, 30) == []


class TestYTSProvider:
    """Tests for YTS provider."""

    RESPONSE = {
        "status": "ok",
        "data": {
            "movies": [
                {
                    "id": 7,
                    "title": "Dune",
                    "year": 2021,
                    "language": "en",
                    "url": "https://yts.lt/movies/dune-2021?ref=api",
                    "summary": "Spice must flow.",
                    "torrents": [
                        {
                            "hash": HASH_A,
                            "quality": "1080p",
                            "seeds": 100,
                            "peers": 10,
                            "size": "2.1 GB",
                            "date_uploaded": "2021-10-20 10:00:00",
                        },
                        {
                            "hash": HASH_B,
                            "quality": "720p",
                            "seeds": 50,
                            "peers": 4,
                            "size": "1.1 GB",
                            "date_uploaded": "2021-10-20 09:00:00",
                        },
                    ],
                }
            ]
        },
    }

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_one_record_per_quality(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = YTSProvider().search("dune", Category.MOVIES, 30)

        assert [r["title"] for r in records] == [
            "Dune (2021) [1080p] [EN]",
            "Dune (2021) [720p] [EN]",
        ]
        record = records[0]
        assert record["seeds"] == 100
        assert record["size"] == "2.1 GB"
        assert record["time"] == "2021-10-20 10:00:00"
        assert record["link"] == "https://yts.lt/movies/dune-2021"
        assert record["desc"] == "Spice must flow."
        assert "&tr=" in record["magnet"]

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_limit_is_capped(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = YTSProvider().search("dune", Category.ALL, 100)

        assert "limit=50" in mock_fetch.call_args[0][0]
        assert len(records) == 2

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_top100_sorts_by_downloads(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        YTSProvider().search("dune", Category.TOP100, 10)

        assert "sort_by=download_count" in mock_fetch.call_args[0][0]

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_non_movie_category_gives_nothing(self, mock_fetch):
        assert YTSProvider().search("dune", Category.MUSIC, 30) == []
        mock_fetch.assert_not_called()

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_api_error(self, mock_fetch):
        mock_fetch.return_value = {
            "status": "error",
            "status_message": "Bad query",
        }

        with pytest.raises(ProviderError, match="Bad query"):
            YTSProvider().search("dune", Category.ALL, 30)

    @patch("src.torwiz.search.providers.yts.fetch_json")
    def test_no_movies(self, mock_fetch):
        mock_fetch.return_value = {"status": "ok", "data": {"movie_count": 0}}

        assert YTSProvider().search("zzz", Category.ALL, 30) == []


class TestTorrentsCsvProvider:
    """Tests for Torrents-CSV provider."""

    RESPONSE = {
        "torrents": [
            {
                "name": "Debian 12 netinst",
                "infohash": HASH_A,
                "seeders": 30,
                "leechers": 2,
                "size_bytes": 4000000000,
                "created_unix": 1700000000,
            },
            {"name": "Broken entry"},
        ]
    }

    @patch("src.torwiz.search.providers.torrentscsv.fetch_json")
    def test_parses_records(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = TorrentsCsvProvider().search("debian", Category.ALL, 7)

        assert "size=7" in mock_fetch.call_args[0][0]
        assert len(records) == 1
        record = records[0]
        assert record["title"] == "Debian 12 netinst"
        assert record["seeds"] == 30
        assert record["peers"] == 2
        assert record["size"] == "4 GB"
        assert record["time"] == 1700000000

    @patch("src.torwiz.search.providers.torrentscsv.fetch_json")
    def test_category_is_ignored(self, mock_fetch):
        mock_fetch.return_value = self.RESPONSE

        records = TorrentsCsvProvider().search("debian", Category.BOOKS, 7)

        assert "Books" not in mock_fetch.call_args[0][0]
        assert len(records) == 1


class TestNyaaProvider:
    """Tests for Nyaa provider."""

    RSS = f"""<?xml version="1.0" encoding="utf-8"?>
<rss xmlns:nyaa="https://nyaa.si/xmlns/nyaa" version="2.0">
  <channel>
    <item>
      <title>[Group] Show - 01 [1080p].mkv</title>
      <guid isPermaLink="true">https://nyaa.si/view/1</guid>
      <pubDate>Sat, 02 Mar 2024 12:00:00 -0000</pubDate>
      <nyaa:seeders>1,024</nyaa:seeders>
      <nyaa:leechers>12</nyaa:leechers>
      <nyaa:infoHash>{HASH_A}</nyaa:infoHash>
      <nyaa:category>Anime - English-translated</nyaa:category>
      <nyaa:size>1.4 GiB</nyaa:size>
    </item>
    <item>
      <title>No hash</title>
    </item>
  </channel>
</rss>
"""

    @patch("src.torwiz.search.providers.nyaa.fetch_text")
    def test_parses_feed(self, mock_fetch):
        mock_fetch.return_value = self.RSS

        records = NyaaProvider().search("show", Category.ALL, 30)

        assert len(records) == 1
        record = records[0]
        assert record["title"] == "[Group] Show - 01 [1080p].mkv"
        assert record["seeds"] == "1,024"
        assert record["peers"] == "12"
        assert record["size"] == "1.4 GiB"
        assert record["time"] == "Sat, 02 Mar 2024 12:00:00 -0000"
        assert record["link"] == "https://nyaa.si/view/1"
        assert record["desc"] == "Anime - English-translated"
        assert HASH_A in record["magnet"]

    @patch("src.torwiz.search.providers.nyaa.fetch_text")
    def test_category_and_top100_params(self, mock_fetch):
        mock_fetch.return_value = self.RSS
        provider = NyaaProvider()

        provider.search("show", Category.TV, 30)
        assert "c=1_0" in mock_fetch.call_args[0][0]

        provider.search("show", Category.TOP100, 30)
        url = mock_fetch.call_args[0][0]
        assert "s=seeders" in url
        assert "o=desc" in url

    @patch("src.torwiz.search.providers.nyaa.fetch_text")
    def test_invalid_feed(self, mock_fetch):
        mock_fetch.return_value = "<rss><channel>"

        with pytest.raises(ProviderError, match="RSS"):
            NyaaProvider().search("show", Category.ALL, 30)


class TestGetMagnet:
    """Tests for magnet resolution shared by all providers."""

    def test_uses_magnet_from_record(self):
        record = {"title": "t", "magnet": "magnet:?xt=urn:btih:abc"}
        assert NyaaProvider().get_magnet(record) == "magnet:?xt=urn:btih:abc"

    def test_builds_magnet_from_info_hash(self):
        magnet = TPBProvider().get_magnet({"title": "t", "info_hash": HASH_B})

        assert magnet.startswith(f"magnet:?xt=urn:btih:{HASH_B}&dn=t")
        assert "&tr=" in magnet

    def test_missing_magnet_raises(self):
        with pytest.raises(MagnetError):
            YTSProvider().get_magnet({"title": "t"})
