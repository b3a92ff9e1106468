"""Realtime Database REST integration: token cache, auth providers, transport."""

from firetables.infrastructure.firebase.auth import (
    GoogleServiceAccountTokenProvider,
    TokenProvider,
)
from firetables.infrastructure.firebase.rest_client import RestTransport
from firetables.infrastructure.firebase.token_cache import Token, TokenCache

__all__ = [
    "GoogleServiceAccountTokenProvider",
    "RestTransport",
    "Token",
    "TokenCache",
    "TokenProvider",
]
