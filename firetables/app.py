"""FirebaseApp: configuration owner and accessor factory.

One FirebaseApp holds one RestTransport and one TokenCache; every collection
and table minted from it shares them.

Example:
    app = FirebaseApp({"database": "https://demo-default-rtdb.firebaseio.com",
                       "credentials": service_account_dict})
    products = app.table("products", {"name": str, "price": (float, Field(gt=0))})
    row_id = await products.create({"name": "Pen", "price": 1})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from firetables.application.collection import CollectionAccessor
from firetables.application.schema_gate import Schema
from firetables.application.table import TableAccessor
from firetables.core.config import AppConfig, Settings, get_settings
from firetables.infrastructure.firebase.auth import (
    GoogleServiceAccountTokenProvider,
    TokenProvider,
)
from firetables.infrastructure.firebase.rest_client import RestTransport
from firetables.infrastructure.firebase.token_cache import TokenCache
from firetables.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class FirebaseApp:
    """Entry point: builds the shared transport and mints collection/table accessors."""

    def __init__(
        self,
        config: AppConfig | Mapping[str, Any],
        *,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            config: AppConfig, or a mapping with ``base_url`` (or ``database``)
                and ``credentials``.
            token_provider: Access-token source; defaults to google-auth
                service account credentials built from ``config.credentials``.
            http_client: Optional httpx client (not closed by aclose()).
            clock: Optional monotonic clock for token expiry (seconds).
        """
        self.config = config if isinstance(config, AppConfig) else AppConfig.model_validate(config)
        provider = token_provider or GoogleServiceAccountTokenProvider(self.config.credentials)
        cache_kwargs: dict[str, Any] = {"ttl_seconds": self.config.token_ttl_seconds}
        if clock is not None:
            cache_kwargs["clock"] = clock
        self.token_cache = TokenCache(provider, **cache_kwargs)
        self.transport = RestTransport(
            self.config.base_url,
            self.token_cache,
            http_client=http_client,
            timeout=self.config.request_timeout_seconds,
        )
        logger.info(
            "FirebaseApp initialized for %s (project %s)",
            self.config.base_url,
            self.config.credentials.project_id,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> FirebaseApp:
        """Build an app from FIREBASE_* environment settings (see Settings)."""
        settings = settings or get_settings()
        return cls(settings.to_app_config(), **kwargs)

    def collection(self, path: str, schema: Schema) -> CollectionAccessor:
        """Return an accessor for the single document at ``path``."""
        return CollectionAccessor(self.transport, path, schema)

    def table(self, path: str, schema: Schema) -> TableAccessor:
        """Return an accessor for the rows stored under ``path``."""
        return TableAccessor(
            self.transport,
            path,
            schema,
            row_id_strategy=self.config.row_id_strategy,
        )

    async def aclose(self) -> None:
        """Close the HTTP connection pool (only if the app created it)."""
        await self.transport.aclose()
        logger.info("FirebaseApp HTTP client closed")

    async def __aenter__(self) -> FirebaseApp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
