"""Centralized configuration.

Credentials and settings live in the gsheets-fetch repo root:
    .env                             - overrides (GSHEETS_SERVICE_ACCOUNT_KEY, etc.)
    google/service_account_key.json  - Google service account key

This module auto-loads the .env file on import. Variables already present in
the environment take precedence over the file.

Environment variables:
    GSHEETS_SERVICE_ACCOUNT_KEY  - path to the service account key
    GSHEETS_APPLICATION_NAME     - user agent sent with feed requests
    GSHEETS_SCOPE                - OAuth scope requested for the session
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# __file__ is src/gsheets_fetch/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
GOOGLE_DIR = REPO_ROOT / "google"

ENV_FILE = REPO_ROOT / ".env"
GOOGLE_SERVICE_ACCOUNT = GOOGLE_DIR / "service_account_key.json"

APPLICATION_NAME = "gsheets-fetch-v0.1.0"

# drive.readonly covers both the Drive file list and Sheets reads
DEFAULT_SCOPE = "https://www.googleapis.com/auth/drive.readonly"

SPREADSHEET_FEED_URL = "https://www.googleapis.com/drive/v3/files"
SHEETS_API_URL = "https://sheets.googleapis.com/"


@dataclass(frozen=True)
class FetcherConfig:
    """Settings shared by the feed service and the worksheet fetcher."""

    application_name: str = APPLICATION_NAME
    scope: str = DEFAULT_SCOPE
    spreadsheet_feed_url: str = SPREADSHEET_FEED_URL
    sheets_api_url: str = SHEETS_API_URL

    @classmethod
    def from_env(cls) -> FetcherConfig:
        """Build a config, applying GSHEETS_* environment overrides."""
        return cls(
            application_name=os.environ.get("GSHEETS_APPLICATION_NAME", APPLICATION_NAME),
            scope=os.environ.get("GSHEETS_SCOPE", DEFAULT_SCOPE),
        )


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def service_account_path() -> Path:
    """Get the configured service account key path."""
    override = os.environ.get("GSHEETS_SERVICE_ACCOUNT_KEY")
    if override:
        return Path(override).expanduser()
    return GOOGLE_SERVICE_ACCOUNT


def get_credential_status() -> dict:
    """Get status of the configured credentials.

    Returns:
        Dictionary with credential status.
    """
    key_path = service_account_path()
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "service_account": {
            "path": str(key_path),
            "exists": key_path.exists(),
        },
        "application_name": os.environ.get("GSHEETS_APPLICATION_NAME", APPLICATION_NAME),
        "scope": os.environ.get("GSHEETS_SCOPE", DEFAULT_SCOPE),
    }


_loaded = _load_env_file(ENV_FILE)
