"""Utility functions for torrent search providers."""

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from .models import ProviderError

# User-Agent string to imitate a popular browser
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# Public trackers appended to magnet links built from an info hash
TRACKERS = [
    "udp://tracker.opentrackr.org:1337/announce",
    "udp://open.stealth.si:80/announce",
    "udp://tracker.torrent.eu.org:451/announce",
    "udp://exodus.desync.com:6969/announce",
    "udp://open.demonii.com:1337/announce",
]


def urlopen(url: str, timeout: float = 30) -> Any:
    """Open URL with User-Agent header.

    Creates a Request object with User-Agent header set to imitate
    a popular browser, preventing blocking by search providers.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds (default: 30)

    Returns:
        HTTP response context manager

    Raises:
        urllib.error.URLError: If network request fails
    """
    request = urllib.request.Request(url)
    request.add_header("User-Agent", USER_AGENT)
    return urllib.request.urlopen(request, timeout=timeout)


def fetch_text(url: str, timeout: float = 30) -> str:
    """Fetch URL body as text.

    Raises:
        ProviderError: If network request fails
    """
    try:
        with urlopen(url, timeout=timeout) as response:
            return response.read().decode("utf-8")
    except (urllib.error.URLError, TimeoutError) as e:
        raise ProviderError(f"Network error: {e}") from e


def fetch_json(url: str, timeout: float = 30) -> Any:
    """Fetch URL and decode JSON body.

    Raises:
        ProviderError: If network request or JSON decoding fails
    """
    text = fetch_text(url, timeout=timeout)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ProviderError(f"Failed to parse API response: {e}") from e


def build_magnet_link(
    info_hash: str, name: str, trackers: list[str] | None = None
) -> str:
    """Build a magnet link from info hash, name, and optional trackers.

    Args:
        info_hash: 40-character hex string torrent info hash
        name: Torrent name to encode in magnet link
        trackers: Optional list of tracker URLs to append

    Returns:
        Complete magnet link string
    """
    encoded_name = urllib.parse.quote(name)
    magnet = f"magnet:?xt=urn:btih:{info_hash}&dn={encoded_name}"

    if trackers:
        for tracker in trackers:
            encoded_tracker = urllib.parse.quote(tracker, safe="/:")
            magnet += f"&tr={encoded_tracker}"

    return magnet
