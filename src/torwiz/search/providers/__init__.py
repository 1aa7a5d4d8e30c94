"""Torrent search provider implementations."""

from .nyaa import NyaaProvider
from .torrentscsv import TorrentsCsvProvider
from .tpb import TPBProvider
from .yts import YTSProvider

__all__ = [
    "NyaaProvider",
    "TorrentsCsvProvider",
    "TPBProvider",
    "YTSProvider",
]
