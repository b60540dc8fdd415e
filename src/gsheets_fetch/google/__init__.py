"""Google service account authentication."""

from gsheets_fetch.google.service_account import (
    SCOPES,
    GoogleServiceAccount,
    Session,
    obtain_session,
    resolve_scope,
)

__all__ = [
    "GoogleServiceAccount",
    "Session",
    "SCOPES",
    "obtain_session",
    "resolve_scope",
]
