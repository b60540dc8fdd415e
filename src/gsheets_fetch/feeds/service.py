"""Feed service implementation backed by the Google Drive and Sheets APIs.

Spreadsheet feed: the Drive v3 file list, filtered to spreadsheets.
Worksheet feed: the Sheets v4 spreadsheet resource (sheet properties only).
Cell feed: the Sheets v4 values resource for a whole worksheet.

Child feed URLs are the URIs of requests built by the discovery services, so
every feed stays addressable by URL while the client library builds it.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Protocol
from urllib.parse import urljoin

import httplib2
from google.auth import exceptions as auth_exceptions
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, build_http, set_user_agent
from googleapiclient.model import JsonModel

from gsheets_fetch.config import FetcherConfig
from gsheets_fetch.exceptions import CredentialError, UpstreamError
from gsheets_fetch.feeds.entries import Cell, Entry, FeedKind, SpreadsheetRef, WorksheetRef
from gsheets_fetch.google import Session, obtain_session

logger = logging.getLogger(__name__)


SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
SPREADSHEET_QUERY = f"mimeType = '{SPREADSHEET_MIME_TYPE}' and trashed = false"
PAGE_SIZE = 1000


class FeedService(Protocol):
    """Authenticated, URL-addressable access to spreadsheet feeds."""

    def exchange(self, credential_bytes: BinaryIO, scope: str) -> Session: ...

    def list_entries(self, session: Session, url: str, feed_kind: FeedKind) -> list[Entry]: ...


def sheet_range(title: str) -> str:
    """Quote a worksheet title as an A1 range covering the whole sheet."""
    return "'" + title.replace("'", "''") + "'"


class GoogleFeedService:
    """Feed service for Google Sheets, using a service account session.

    Usage:
        feeds = GoogleFeedService()
        with open("service_account_key.json", "rb") as f:
            session = feeds.exchange(f, DEFAULT_SCOPE)

        spreadsheets = feeds.list_entries(
            session, feeds.config.spreadsheet_feed_url, FeedKind.SPREADSHEET
        )
    """

    def __init__(self, config: FetcherConfig | None = None) -> None:
        self.config = config or FetcherConfig()

    def exchange(self, credential_bytes: BinaryIO, scope: str) -> Session:
        """Exchange a service account key for a session."""
        return obtain_session(
            credential_bytes,
            scope,
            application_name=self.config.application_name,
        )

    def list_entries(self, session: Session, url: str, feed_kind: FeedKind) -> list[Entry]:
        """List the entries of a feed.

        One authorized connection is opened per call and closed before
        returning, including across the pages of a spreadsheet listing.

        Args:
            session: Authenticated session.
            url: Feed URL (the spreadsheet-list URL or an entry's child_feed_url).
            feed_kind: Kind of entries the feed holds.

        Returns:
            Entries in the order the API returns them.

        Raises:
            UpstreamError: If the request fails or the response is malformed.
            CredentialError: If the access token cannot be obtained.
        """
        parsers = {
            FeedKind.SPREADSHEET: self._list_spreadsheets,
            FeedKind.WORKSHEET: self._list_worksheets,
            FeedKind.CELL: self._list_cells,
        }
        if feed_kind not in parsers:
            raise ValueError(f"Unknown feed kind: {feed_kind}")

        http = self._authorized_http(session)
        try:
            return parsers[feed_kind](http, url)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise UpstreamError(
                f"Malformed {feed_kind.value} feed at {url}: {e}",
                feed_kind=feed_kind.value,
                url=url,
            ) from e
        finally:
            http.close()

    # =========================================================================
    # Services
    # =========================================================================

    def _authorized_http(self, session: Session) -> Any:
        """Create an authorized HTTP object for the session."""
        http = AuthorizedHttp(session.credentials, http=build_http())
        return set_user_agent(http, session.application_name)

    def _drive_service(self, http: Any, api_endpoint: str) -> Any:
        return build(
            "drive",
            "v3",
            http=http,
            cache_discovery=False,
            client_options={"api_endpoint": api_endpoint},
        )

    def _sheets_service(self, http: Any) -> Any:
        return build(
            "sheets",
            "v4",
            http=http,
            cache_discovery=False,
            client_options={"api_endpoint": self.config.sheets_api_url},
        )

    # =========================================================================
    # Feeds
    # =========================================================================

    def _list_spreadsheets(self, http: Any, url: str) -> list[Entry]:
        # The file list lives at "<endpoint>files", so the feed URL fixes the endpoint
        drive = self._drive_service(http, urljoin(url, "."))
        sheets = self._sheets_service(http)

        entries: list[Entry] = []
        request = drive.files().list(
            q=SPREADSHEET_QUERY,
            fields="nextPageToken,files(id,name)",
            pageSize=PAGE_SIZE,
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )

        while request is not None:
            result = self._execute(request, FeedKind.SPREADSHEET)
            for item in result.get("files", []):
                worksheet_feed = sheets.spreadsheets().get(
                    spreadsheetId=item["id"],
                    fields="spreadsheetId,sheets.properties(sheetId,title,index)",
                )
                entries.append(
                    SpreadsheetRef(
                        title=item["name"],
                        id=item["id"],
                        child_feed_url=worksheet_feed.uri,
                    )
                )
            request = drive.files().list_next(request, result)

        return entries

    def _list_worksheets(self, http: Any, url: str) -> list[Entry]:
        sheets = self._sheets_service(http)
        result = self._execute(self._feed_request(http, url), FeedKind.WORKSHEET)
        spreadsheet_id = result["spreadsheetId"]

        entries: list[Entry] = []
        for sheet_data in result.get("sheets", []):
            props = sheet_data["properties"]
            cell_feed = (
                sheets.spreadsheets()
                .values()
                .get(
                    spreadsheetId=spreadsheet_id,
                    range=sheet_range(props["title"]),
                    majorDimension="ROWS",
                    valueRenderOption="FORMATTED_VALUE",
                )
            )
            entries.append(
                WorksheetRef(
                    title=props["title"],
                    spreadsheet_id=spreadsheet_id,
                    sheet_id=props.get("sheetId", 0),
                    index=props.get("index", 0),
                    child_feed_url=cell_feed.uri,
                )
            )
        return entries

    def _list_cells(self, http: Any, url: str) -> list[Entry]:
        result = self._execute(self._feed_request(http, url), FeedKind.CELL)

        # Values arrive row-major; wholly empty rows come back as [] and yield no cells
        entries: list[Entry] = []
        for row_index, row in enumerate(result.get("values", []), start=1):
            for column_index, value in enumerate(row, start=1):
                entries.append(Cell(row=row_index, column=column_index, value=value))
        return entries

    # =========================================================================
    # Transport
    # =========================================================================

    def _feed_request(self, http: Any, url: str) -> HttpRequest:
        """GET request for a child feed URL, decoded like a discovery response."""
        return HttpRequest(http, JsonModel(data_wrapper=False).response, url, method="GET")

    def _execute(self, request: HttpRequest, feed_kind: FeedKind) -> dict:
        """Execute a feed request, mapping library errors to feed errors."""
        logger.debug(f"Fetching {feed_kind.value} feed: {request.uri}")

        try:
            return request.execute()
        except HttpError as e:
            raise UpstreamError(
                f"{feed_kind.value} feed request failed with status {e.resp.status}: {e.reason}",
                feed_kind=feed_kind.value,
                url=request.uri,
                status_code=e.resp.status,
            ) from e
        except auth_exceptions.RefreshError as e:
            raise CredentialError(f"Could not obtain an access token: {e}") from e
        except (auth_exceptions.TransportError, httplib2.HttpLib2Error, OSError) as e:
            raise UpstreamError(
                f"{feed_kind.value} feed request failed: {e}",
                feed_kind=feed_kind.value,
                url=request.uri,
            ) from e
