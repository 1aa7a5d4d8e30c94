"""Conversion of raw provider records to TorrentRecord."""

from datetime import datetime

from ..util.log import get_logger
from ..util.print import parse_date, print_size
from .models import RawRecord, TorrentRecord

logger = get_logger()


def _parse_count(value) -> int | None:
    """Seed/peer count as non-negative int, None when absent or invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value >= 0 else None
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if text.isdigit():
            return int(text)
    return None


def _parse_size(value) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return print_size(value, size_bytes=1024) if value >= 0 else None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_uploaded(value) -> datetime | str | None:
    if isinstance(value, (datetime, int, float)):
        return parse_date(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_text(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def normalize(raw: RawRecord, provider: str) -> TorrentRecord | None:
    """Tag raw record with its provider and validate optional fields.

    Returns:
        TorrentRecord, or None if the record is not a dict or has no title
    """
    if not isinstance(raw, dict):
        logger.debug(f"Dropping malformed record from {provider}: {raw!r}")
        return None

    title = _parse_text(raw.get("title"))
    if title is None:
        logger.debug(f"Dropping record without title from {provider}")
        return None

    return TorrentRecord(
        title=title,
        provider=provider,
        magnet_ref=raw,
        size_text=_parse_size(raw.get("size")),
        seeds=_parse_count(raw.get("seeds")),
        peers=_parse_count(raw.get("peers")),
        uploaded_at=_parse_uploaded(raw.get("time")),
        description=_parse_text(raw.get("desc")),
        detail_link=_parse_text(raw.get("link")),
    )


def normalize_all(raws: list[RawRecord], provider: str) -> list[TorrentRecord]:
    """Normalize records of one provider, keeping their order."""
    records = []
    for raw in raws:
        record = normalize(raw, provider)
        if record is not None:
            records.append(record)
    return records
