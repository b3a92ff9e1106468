"""Bearer token cache shared by every request of one FirebaseApp."""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable
from dataclasses import dataclass

from firetables.core.constants import DEFAULT_TOKEN_TTL_SECONDS
from firetables.domain.exceptions import AuthenticationException
from firetables.infrastructure.firebase.auth import TokenProvider
from firetables.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Token:
    """Bearer token and the clock reading after which it must not be used."""

    value: str
    expires_at: float


class TokenCache:
    """Caches one access token and refreshes it lazily once it expires.

    Expiry is checked on every get_token() call. Concurrent callers that see an
    expired token may both refresh; the later result simply replaces the token.
    """

    def __init__(
        self,
        provider: TokenProvider,
        ttl_seconds: float = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._ttl = ttl_seconds
        self._clock = clock
        self._token: Token | None = None

    @property
    def token(self) -> Token | None:
        return self._token

    async def get_token(self) -> str:
        """Return a valid access token, fetching a new one if absent or expired.

        Raises:
            AuthenticationException: If the provider fails or returns no token.
        """
        now = self._clock()
        cached = self._token
        if cached is not None and now <= cached.expires_at:
            return cached.value
        value = await self._fetch()
        self._token = Token(value=value, expires_at=now + self._ttl)
        logger.debug("Access token refreshed; valid for %.0fs", self._ttl)
        return value

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a fresh one."""
        self._token = None

    async def _fetch(self) -> str:
        try:
            if inspect.iscoroutinefunction(self._provider.get_token):
                value = await self._provider.get_token()
            else:
                value = await asyncio.to_thread(self._provider.get_token)
                if inspect.isawaitable(value):
                    value = await value
        except AuthenticationException:
            raise
        except Exception as e:
            logger.warning("Access token refresh failed: %s", e)
            raise AuthenticationException(f"Could not obtain access token: {e}") from e
        if not value or not isinstance(value, str):
            raise AuthenticationException("Auth provider returned an empty access token")
        return value
