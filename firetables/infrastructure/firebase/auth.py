"""Access-token providers.

A provider is anything with a ``get_token()`` method returning a bearer token
string, either directly or as an awaitable. The default provider uses
google-auth service account credentials scoped for the Realtime Database.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Awaitable, Protocol

from firetables.core.constants import FIREBASE_SCOPES

if TYPE_CHECKING:
    from firetables.core.config import ServiceAccountCredentials


class TokenProvider(Protocol):
    """Source of fresh access tokens (sync or async)."""

    def get_token(self) -> str | Awaitable[str]:
        """Return a new access token. Raise on failure."""
        ...


def _get_credentials(key_dict: dict[str, Any]):
    """Return google.oauth2.service_account.Credentials for the Realtime Database."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=list(FIREBASE_SCOPES)
    )


class GoogleServiceAccountTokenProvider:
    """Blocking token provider backed by google-auth service account credentials.

    TokenCache runs sync providers in a worker thread, so the refresh does not
    block the event loop.
    """

    def __init__(self, credentials: ServiceAccountCredentials) -> None:
        self._credentials = _get_credentials(credentials.to_info())
        self._lock = threading.Lock()

    def get_token(self) -> str:
        from google.auth.transport.requests import Request

        with self._lock:
            self._credentials.refresh(Request())
            return self._credentials.token
