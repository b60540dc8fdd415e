"""Spreadsheet feeds: entry types and the Google feed service."""

from gsheets_fetch.feeds.entries import (
    Cell,
    Entry,
    FeedKind,
    SpreadsheetRef,
    WorksheetRef,
    column_label,
)
from gsheets_fetch.feeds.service import FeedService, GoogleFeedService

__all__ = [
    "Cell",
    "Entry",
    "FeedKind",
    "FeedService",
    "GoogleFeedService",
    "SpreadsheetRef",
    "WorksheetRef",
    "column_label",
]
