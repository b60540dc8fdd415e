"""gsheets-fetch exceptions."""

from __future__ import annotations


class GSheetsFetchError(Exception):
    """Base exception for gsheets-fetch errors."""

    pass


class CredentialError(GSheetsFetchError):
    """Raised when a service account credential is invalid or cannot be scoped."""

    pass


class CredentialsNotFoundError(CredentialError):
    """Raised when the service account key file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Service account key not found at {path}. "
            "Please download a key from Google Cloud Console."
        )


class TitleLookupError(GSheetsFetchError):
    """Raised when a title lookup does not resolve to exactly one resource."""

    def __init__(
        self,
        resource: str,
        title: str,
        count: int,
        container: str | None = None,
    ):
        self.resource = resource
        self.title = title
        self.count = count
        self.container = container

        if container is None:
            message = f"Found {count} {resource}s with name {title}"
        else:
            message = f"Found {count} {resource}s in {container} with name {title}"
        super().__init__(message)


class NotFoundError(TitleLookupError):
    """Raised when no spreadsheet or worksheet has the requested title."""

    pass


class AmbiguousError(TitleLookupError):
    """Raised when more than one spreadsheet or worksheet has the requested title."""

    pass


class UpstreamError(GSheetsFetchError):
    """Raised when the feed service fails (network, permission, malformed feed)."""

    def __init__(
        self,
        message: str,
        feed_kind: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ):
        self.feed_kind = feed_kind
        self.url = url
        self.status_code = status_code
        super().__init__(message)
