"""Fetch Google Sheets worksheets by title.

Usage:
    from gsheets_fetch.google import GoogleServiceAccount
    from gsheets_fetch.sheets import WorksheetFetcher

    auth = GoogleServiceAccount("service_account_key.json")
    fetcher = WorksheetFetcher()

    grid = fetcher.fetch_worksheet(auth.session, "Colour Counts", "Sheet1")

Setup:
    1. Create a service account key in Google Cloud Console
    2. Import: gsheets-fetch import-key ~/Downloads/key.json
    3. Share the spreadsheet with the service account email
"""

from __future__ import annotations

from gsheets_fetch.sheets.client import Grid, WorksheetFetcher, find_one, reshape

__all__ = ["Grid", "WorksheetFetcher", "find_one", "reshape"]
