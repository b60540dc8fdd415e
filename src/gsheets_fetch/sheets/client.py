"""Worksheet fetcher implementation."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

from gsheets_fetch.config import FetcherConfig
from gsheets_fetch.exceptions import AmbiguousError, NotFoundError
from gsheets_fetch.feeds import (
    Cell,
    Entry,
    FeedKind,
    FeedService,
    GoogleFeedService,
    SpreadsheetRef,
    WorksheetRef,
)
from gsheets_fetch.google import Session

logger = logging.getLogger(__name__)

Grid = list[list[str]]

E = TypeVar("E", bound=Entry)


def find_one(
    entries: Iterable[E],
    title: str,
    resource: str,
    container: str | None = None,
) -> E:
    """Return the single entry with exactly this title.

    Raises:
        NotFoundError: If no entry has the title.
        AmbiguousError: If more than one entry has the title.
    """
    matches = [entry for entry in entries if entry.title == title]
    if not matches:
        raise NotFoundError(resource, title, 0, container)
    if len(matches) > 1:
        raise AmbiguousError(resource, title, len(matches), container)
    return matches[0]


def reshape(cells: Iterable[Cell]) -> Grid:
    """Group cells into rows of values.

    A new row starts whenever the row index changes, so cells must already
    be grouped by row. Values keep their arrival order within a row.
    """
    return [
        [cell.value for cell in row]
        for _, row in itertools.groupby(cells, key=lambda cell: cell.row)
    ]


class WorksheetFetcher:
    """Fetch worksheets by spreadsheet and worksheet title.

    Usage:
        auth = GoogleServiceAccount()
        fetcher = WorksheetFetcher(GoogleFeedService())

        grid = fetcher.fetch_worksheet(auth.session, "Colour Counts", "Sheet1")
        # [["Colour", "Count"], ["red", "123"]]

    Note:
        The spreadsheet must be shared with the service account email.
    """

    def __init__(
        self,
        feed_service: FeedService | None = None,
        config: FetcherConfig | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            feed_service: Feed service to query. Defaults to GoogleFeedService.
            config: Fetcher settings. Defaults to FetcherConfig().
        """
        self.config = config or FetcherConfig()
        self._feeds = feed_service or GoogleFeedService(self.config)

    # =========================================================================
    # Spreadsheets
    # =========================================================================

    def list_spreadsheets(self, session: Session) -> list[SpreadsheetRef]:
        """List the spreadsheets visible to the session."""
        return self._feeds.list_entries(
            session, self.config.spreadsheet_feed_url, FeedKind.SPREADSHEET
        )

    def find_spreadsheet(self, session: Session, title: str) -> SpreadsheetRef:
        """Find the spreadsheet with exactly this title.

        Args:
            session: Authenticated session.
            title: Spreadsheet title (case-sensitive).

        Returns:
            The matching spreadsheet.

        Raises:
            NotFoundError: If no spreadsheet has the title.
            AmbiguousError: If several spreadsheets share the title.
        """
        spreadsheet = find_one(self.list_spreadsheets(session), title, "spreadsheet")
        logger.info(f"Found spreadsheet '{title}': {spreadsheet.id}")
        return spreadsheet

    # =========================================================================
    # Worksheets
    # =========================================================================

    def list_worksheets(self, session: Session, spreadsheet: SpreadsheetRef) -> list[WorksheetRef]:
        """List the worksheets of a spreadsheet."""
        return self._feeds.list_entries(session, spreadsheet.child_feed_url, FeedKind.WORKSHEET)

    def find_worksheet(
        self,
        session: Session,
        spreadsheet: SpreadsheetRef,
        title: str,
    ) -> WorksheetRef:
        """Find the worksheet with exactly this title within a spreadsheet.

        Raises:
            NotFoundError: If no worksheet has the title.
            AmbiguousError: If several worksheets share the title.
        """
        worksheet = find_one(
            self.list_worksheets(session, spreadsheet),
            title,
            "worksheet",
            container=spreadsheet.title,
        )
        logger.info(f"Found worksheet '{title}' in '{spreadsheet.title}'")
        return worksheet

    # =========================================================================
    # Cells
    # =========================================================================

    def fetch_cells(self, session: Session, worksheet: WorksheetRef) -> list[Cell]:
        """Fetch the cells of a worksheet, in feed order."""
        return self._feeds.list_entries(session, worksheet.child_feed_url, FeedKind.CELL)

    @staticmethod
    def reshape(cells: Sequence[Cell]) -> Grid:
        """Group cells into a grid. See :func:`reshape`."""
        return reshape(cells)

    def fetch_worksheet(
        self,
        session: Session,
        spreadsheet_title: str,
        worksheet_title: str,
    ) -> Grid:
        """Fetch a worksheet's values as a grid of text.

        Args:
            session: Authenticated session.
            spreadsheet_title: Title of the spreadsheet.
            worksheet_title: Title of the worksheet within it.

        Returns:
            One list of values per row.

        Raises:
            NotFoundError: If the spreadsheet or worksheet does not exist.
            AmbiguousError: If the spreadsheet or worksheet title is not unique.
            UpstreamError: If the feed service fails.
        """
        spreadsheet = self.find_spreadsheet(session, spreadsheet_title)
        worksheet = self.find_worksheet(session, spreadsheet, worksheet_title)
        grid = self.reshape(self.fetch_cells(session, worksheet))
        logger.info(f"Fetched {len(grid)} rows from '{spreadsheet_title}' / '{worksheet_title}'")
        return grid
