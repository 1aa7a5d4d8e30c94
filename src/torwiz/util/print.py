# Torwiz - Interactive terminal wizard for torrent search
# Copyright (C) 2024  Anton Larionov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from functools import cache

SIZE_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(?:([kmgtpe])(i)?)?(b|bytes?)?\s*$",
    re.IGNORECASE,
)

SIZE_EXPONENTS = {"": 0, "k": 1, "m": 2, "g": 3, "t": 4, "p": 5, "e": 6}

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m-%d %Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%d/%m/%Y",
)


@cache
def print_size(
    num: int, suffix: str = "B", size_bytes: int = 1000, places: int = 2
) -> str:
    """Format a number of bytes as a human-readable size string."""
    r_unit = None
    r_num = None

    for unit in ("", "k", "M", "G", "T", "P", "E", "Z", "Y"):
        if abs(num) < size_bytes:
            r_unit = unit
            r_num = num
            break
        num /= size_bytes

    r_size = f"{r_num:.{places}f}"
    if places > 0:
        r_size = r_size.rstrip("0").rstrip(".")

    return f"{r_size} {r_unit}{suffix}"


@cache
def parse_size(size_text: str) -> int | None:
    """Parse a free-form size string like '1.2 GB' or '700MiB' to bytes.

    Decimal and binary prefixes are both read as powers of 1024, which is
    what torrent indexes mean in practice. Thousands separators are ignored.

    Returns:
        Size in bytes, or None if the text is not a size
    """
    if not size_text:
        return None

    match = SIZE_PATTERN.match(size_text.replace(",", ""))
    if not match:
        return None

    value, prefix, _, unit = match.groups()
    if prefix is None and unit is None and not size_text.strip().isdigit():
        return None

    exponent = SIZE_EXPONENTS[(prefix or "").lower()]
    return int(float(value) * 1024**exponent)


def print_file_size(size_text: str) -> str:
    """Normalize a free-form size string, passing it through on failure."""
    size = parse_size(size_text) if isinstance(size_text, str) else None
    if size is None:
        return size_text
    return print_size(size, size_bytes=1024, places=1)


def parse_date(value) -> datetime | None:
    """Parse datetime, unix timestamp or date string to naive local time."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        dt = _parse_date_string(value.strip())
        if dt is None:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _parse_date_string(text: str) -> datetime | None:
    if not text:
        return None

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # RFC 2822, used by RSS feeds
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def format_date(value, now: datetime | None = None):
    """Format an upload date compactly.

    Time of day for today, month and day for this year, full date otherwise.
    Unparseable input is returned unchanged.
    """
    dt = parse_date(value)
    if dt is None:
        return value

    now = now or datetime.now()

    if dt.date() == now.date():
        return f"{dt:%H:%M}"
    elif dt.year == now.year:
        return f"{dt:%b} {dt.day}"
    else:
        return f"{dt:%b} {dt.day}, {dt.year}"


def print_time_ago(dt: datetime | None, now: datetime | None = None) -> str:
    if dt is None:
        return ""

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)

    now = now or datetime.now()
    seconds = (now - dt).total_seconds()

    if seconds < 60:
        return "just now"
    elif seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    elif seconds < 86400:
        hours = int(seconds / 3600)
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    elif seconds < 604800:  # 7 days
        days = int(seconds / 86400)
        return f"{days} day{'s' if days > 1 else ''} ago"
    elif seconds < 2592000:  # 30 days
        weeks = int(seconds / 604800)
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    elif seconds < 31536000:  # 365 days
        months = int(seconds / 2592000)
        return f"{months} month{'s' if months > 1 else ''} ago"
    else:
        years = int(seconds / 31536000)
        return f"{years} year{'s' if years > 1 else ''} ago"
