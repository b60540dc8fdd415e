"""Google Service Account authentication.

Service accounts are used for server-to-server authentication without user
interaction. The service account can only see spreadsheets that have been
explicitly shared with its email address.

Example:
    >>> with open("service_account_key.json", "rb") as f:
    ...     session = obtain_session(f, "https://www.googleapis.com/auth/drive.readonly")

    >>> auth = GoogleServiceAccount(key_path="service_account_key.json")
    >>> auth.email
    'reader@my-project.iam.gserviceaccount.com'
"""

from __future__ import annotations

import contextlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from google.oauth2 import service_account

from gsheets_fetch.config import APPLICATION_NAME, service_account_path
from gsheets_fetch.exceptions import CredentialError, CredentialsNotFoundError

logger = logging.getLogger(__name__)


SCOPES = {
    "drive_readonly": "https://www.googleapis.com/auth/drive.readonly",
    "sheets_readonly": "https://www.googleapis.com/auth/spreadsheets.readonly",
    "feeds": "https://spreadsheets.google.com/feeds",
}


@dataclass(frozen=True)
class Session:
    """Authenticated access to the feed service.

    Holds scoped service account credentials. The access token itself is
    fetched lazily by google-auth on the first request.
    """

    credentials: service_account.Credentials
    application_name: str = APPLICATION_NAME

    @property
    def email(self) -> str:
        """Get the service account email address."""
        return self.credentials.service_account_email

    @property
    def project_id(self) -> str | None:
        """Get the Google Cloud project of the service account."""
        return self.credentials.project_id


def resolve_scope(scope: str) -> str:
    """Resolve a scope name to its full URL.

    Raises:
        CredentialError: If the scope is neither a known name nor an https URL.
    """
    if not isinstance(scope, str) or not scope or any(c.isspace() for c in scope):
        raise CredentialError(f"Malformed scope: {scope!r}")
    if scope.startswith("https://"):
        return scope
    if scope in SCOPES:
        return SCOPES[scope]
    raise CredentialError(f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}")


def obtain_session(
    credential_bytes: BinaryIO,
    required_scope: str,
    application_name: str = APPLICATION_NAME,
) -> Session:
    """Create a session from a service account key.

    The stream is closed before returning, whether or not the key is valid.

    Args:
        credential_bytes: Binary stream holding the service account JSON key.
        required_scope: The single OAuth scope to request.
        application_name: User agent sent with feed requests.

    Returns:
        Session scoped to exactly ``required_scope``.

    Raises:
        CredentialError: If the key is invalid or the scope is malformed.
    """
    with contextlib.closing(credential_bytes) as stream:
        raw = stream.read()

        if not raw:
            raise CredentialError("Service account key is empty")

        try:
            key_data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CredentialError(f"Invalid JSON in service account key: {e}") from e

        if not isinstance(key_data, dict):
            raise CredentialError("Invalid service account key: expected a JSON object")

        if key_data.get("type") != "service_account":
            raise CredentialError(
                f"Invalid key file: expected type 'service_account', "
                f"got '{key_data.get('type')}'"
            )

        scope = resolve_scope(required_scope)

        try:
            credentials = service_account.Credentials.from_service_account_info(
                key_data,
                scopes=[scope],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CredentialError(f"Invalid service account key: {e}") from e

    logger.info(f"Service account session created: {key_data.get('client_email', '')}")
    logger.info(f"Scope: {scope}")
    return Session(credentials=credentials, application_name=application_name)


class GoogleServiceAccount:
    """Service account loaded from a key file.

    Note: To read a spreadsheet, share it with the service account email.
    """

    def __init__(
        self,
        key_path: str | Path | None = None,
        scope: str = "drive_readonly",
        application_name: str = APPLICATION_NAME,
    ):
        """Initialize service account authentication.

        Args:
            key_path: Path to service account JSON key file. Defaults to the
                configured location (see gsheets_fetch.config).
            scope: Scope name (e.g., "drive_readonly") or full URL.
            application_name: User agent sent with feed requests.

        Raises:
            CredentialsNotFoundError: If key file not found.
            CredentialError: If key file is invalid.
        """
        self.key_path = Path(key_path) if key_path is not None else service_account_path()

        if not self.key_path.exists():
            raise CredentialsNotFoundError(str(self.key_path))

        self.scope = resolve_scope(scope)
        try:
            key_file = open(self.key_path, "rb")
        except OSError as e:
            raise CredentialError(f"Cannot read service account key {self.key_path}: {e}") from e

        self._session = obtain_session(
            key_file,
            self.scope,
            application_name=application_name,
        )

    @property
    def session(self) -> Session:
        """Get the authenticated session."""
        return self._session

    @property
    def email(self) -> str:
        """Get the service account email address.

        Share your spreadsheets with this email to grant access.
        """
        return self._session.email

    @property
    def project_id(self) -> str | None:
        return self._session.project_id

    def get_info(self) -> dict[str, Any]:
        """Get information about the service account.

        Returns:
            Dictionary with service account details.
        """
        return {
            "type": "service_account",
            "email": self.email,
            "project_id": self.project_id,
            "scope": self.scope,
            "key_path": str(self.key_path),
        }
