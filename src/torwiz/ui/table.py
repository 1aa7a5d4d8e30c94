"""Selection table built from search results."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple

from rich.cells import cell_len
from rich.text import Text

from ..config import DisplayColumns
from ..search.models import TorrentRecord
from ..util.log import log_time
from ..util.print import format_date, print_file_size

ELLIPSIS = "…"

SIZE_ANNOTATION = re.compile(r"\d+(\.\d+)? ?[kmgt]b", re.IGNORECASE)
MULTIPLE_SPACES = re.compile(r"\s\s+")
EMPTY_DASH_BLOCK = re.compile(r"- -")
TRAILING_DASH = re.compile(r"\s*-\s*$")


class Column(NamedTuple):
    key: str
    header: str
    style: str


TITLE_COLUMN = Column("title", "TITLE", "cyan")

OPTIONAL_COLUMNS = (
    Column("seeds", "SEEDS", "green"),
    Column("peers", "PEERS", "red"),
    Column("size", "SIZE", "yellow"),
    Column("date", "DATE", "magenta"),
)


@dataclass(frozen=True)
class Choice:
    """One entry of a single-select list.

    Disabled entries (table header and rule) can't be selected.
    """

    name: Text | str
    short: str = ""
    value: Any = None
    disabled: bool = False


def column_value(record: TorrentRecord, key: str):
    return {
        "seeds": record.seeds,
        "peers": record.peers,
        "size": record.size_text,
        "date": record.uploaded_at,
    }[key]


ColumnPolicy = Callable[[list[TorrentRecord], str], bool]


def sample_first_record(records: list[TorrentRecord], key: str) -> bool:
    """Show column if the first record has the field.

    Later records are not looked at: a result set whose first record
    lacks a field has no such column, even if other records have it.
    """
    return bool(records) and column_value(records[0], key) is not None


def union_of_records(records: list[TorrentRecord], key: str) -> bool:
    """Show column if any record has the field."""
    return any(column_value(r, key) is not None for r in records)


def normalize_title(title: str) -> str:
    """Strip size annotations and leftover separators from a title.

    Rules are applied until the title stops changing, so
    normalize_title(normalize_title(t)) == normalize_title(t).
    """
    previous = None
    while title != previous:
        previous = title
        title = SIZE_ANNOTATION.sub("", title)
        title = MULTIPLE_SPACES.sub(" ", title)
        title = EMPTY_DASH_BLOCK.sub("-", title)
        title = TRAILING_DASH.sub("", title)
        title = title.strip()
    return title


def truncate(text: str, width: int) -> str:
    """Shorten text to at most width characters, marking the cut with …"""
    if len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return text[:width]
    return text[: width - len(ELLIPSIS)].rstrip() + ELLIPSIS


def _pad(value: str, width: int, left: bool) -> str:
    fill = " " * max(width - cell_len(value), 0)
    return fill + value if left else value + fill


class TableFormatter:
    """Turns ranked records into an aligned, colored choice list.

    The title column is always shown. Seeds, peers, size and date columns
    are shown when enabled in configuration and accepted by the column
    policy (first record sampling by default).
    """

    def __init__(
        self,
        columns: DisplayColumns,
        policy: ColumnPolicy = sample_first_record,
    ):
        self._columns = columns
        self._policy = policy

    def displayed_columns(self, records: list[TorrentRecord]) -> list[Column]:
        columns = [TITLE_COLUMN]
        for column in OPTIONAL_COLUMNS:
            if getattr(self._columns, column.key) and self._policy(
                records, column.key
            ):
                columns.append(column)
        return columns

    def _cell(self, record: TorrentRecord, key: str) -> str:
        value = column_value(record, key)
        if value is None:
            return ""
        if key == "size":
            return str(print_file_size(value))
        if key == "date":
            return str(format_date(value))
        return str(value)

    @log_time
    def format(
        self, records: list[TorrentRecord], truncate_width: int
    ) -> list[Choice]:
        """Build choice list for the records.

        Returns:
            Header and rule entries followed by one entry per record,
            plain title entries if no optional column is shown, or an
            empty list for no records
        """
        if not records:
            return []

        columns = self.displayed_columns(records)
        rows = [
            [truncate(normalize_title(r.title), truncate_width)]
            + [self._cell(r, c.key) for c in columns[1:]]
            for r in records
        ]

        if len(columns) == 1:
            return [
                Choice(name=row[0], short=row[0].strip(), value=record)
                for row, record in zip(rows, records)
            ]

        widths = [
            max([cell_len(c.header)] + [cell_len(row[i]) for row in rows])
            for i, c in enumerate(columns)
        ]

        header = self._line(
            [c.header for c in columns], columns, widths, header=True
        )
        rule = "|" + "―" * (header.cell_len - 2) + "|"

        choices = [
            Choice(name=header, disabled=True),
            Choice(name=Text(rule), disabled=True),
        ]
        for row, record in zip(rows, records):
            choices.append(
                Choice(
                    name=self._line(row, columns, widths),
                    short=row[0].strip(),
                    value=record,
                )
            )
        return choices

    def _line(
        self,
        cells: list[str],
        columns: list[Column],
        widths: list[int],
        header: bool = False,
    ) -> Text:
        line = Text("| ")
        for i, (cell, column, width) in enumerate(zip(cells, columns, widths)):
            if i:
                line.append(" | ")
            # Title is left aligned, other columns right aligned
            padded = _pad(cell, width, left=i > 0 and not header)
            style = f"bold {column.style}" if header else column.style
            line.append(padded, style=style)
        line.append(" |")
        return line
