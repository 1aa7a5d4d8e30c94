"""Torrent details view shown before a download is confirmed."""

from datetime import datetime

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from ..search.models import TorrentRecord
from ..util.log import log_time
from ..util.print import (
    format_date,
    parse_date,
    print_file_size,
    print_time_ago,
)


def _uploaded(value: datetime | str) -> str:
    text = format_date(value)
    dt = parse_date(value)
    if dt is not None:
        text += f" ({print_time_ago(dt)})"
    return text


def details_markdown(
    record: TorrentRecord, provider_name: str | None = None
) -> str:
    """Markdown body with every known field of the record.

    Missing fields are left out instead of being shown as empty.
    """
    md = "## General\n"
    md += f"- **Provider:** {provider_name or record.provider}\n"

    md += "## Statistics\n"
    if record.size_text is not None:
        md += f"- **Size:** {print_file_size(record.size_text)}\n"
    if record.seeds is not None:
        md += f"- **Seeders:** {record.seeds}\n"
    if record.peers is not None:
        md += f"- **Leechers:** {record.peers}\n"
    if record.uploaded_at is not None:
        md += f"- **Uploaded:** {_uploaded(record.uploaded_at)}\n"

    if record.description:
        md += "## Description\n"
        md += f"{record.description}\n"

    if record.detail_link:
        md += "## Link\n"
        md += f"<{record.detail_link}>\n"

    return md


@log_time
def display_torrent_details(
    console: Console,
    record: TorrentRecord,
    provider_name: str | None = None,
) -> None:
    console.print(
        Panel(
            Markdown(details_markdown(record, provider_name)),
            title=Text(record.title, style="bold cyan"),
            title_align="left",
            border_style="cyan",
        )
    )
