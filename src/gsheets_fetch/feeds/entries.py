"""Feed entry types returned by a feed service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FeedKind(Enum):
    """Kind of feed requested from a feed service."""

    SPREADSHEET = "spreadsheet"
    WORKSHEET = "worksheet"
    CELL = "cell"


def column_label(column: int) -> str:
    """Convert a 1-based column index to letters. 1=A, 26=Z, 27=AA, etc."""
    result = ""
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        result = chr(ord("A") + remainder) + result
    return result


class Entry:
    """A single entry of a feed. Every entry has a title."""

    title: str


@dataclass(frozen=True)
class SpreadsheetRef(Entry):
    """A spreadsheet visible to the session."""

    title: str
    id: str
    child_feed_url: str


@dataclass(frozen=True)
class WorksheetRef(Entry):
    """A worksheet (tab) within a spreadsheet."""

    title: str
    spreadsheet_id: str
    sheet_id: int
    index: int
    child_feed_url: str


@dataclass(frozen=True)
class Cell(Entry):
    """A single cell value with 1-based row and column indices."""

    row: int
    column: int
    value: str

    @property
    def title(self) -> str:
        """A1 label of the cell, e.g. "B2"."""
        return f"{column_label(self.column)}{self.row}"
