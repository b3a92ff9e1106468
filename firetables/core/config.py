"""Configuration: environment settings and per-app configuration models.

Settings come from the environment (and .env) via pydantic-settings with the
FIREBASE_ prefix. AppConfig is the explicit configuration a FirebaseApp is
built from; it can be constructed directly or derived from Settings.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from firetables.core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, DEFAULT_TOKEN_TTL_SECONDS
from firetables.domain.exceptions import ConfigurationException

RowIdStrategy = Literal["server", "client"]


class ServiceAccountCredentials(BaseModel):
    """Google service account fields, passed through to the auth provider.

    Only project_id, private_key and client_email are required; the rest of
    the downloaded key file is accepted and kept as-is.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    project_id: str
    private_key: str
    client_email: str
    type: str | None = None
    auth_uri: str | None = None
    token_uri: str | None = None
    client_id: str | None = None
    private_key_id: str | None = None
    universe_domain: str | None = None
    client_x509_cert_url: str | None = None
    auth_provider_x509_cert_url: str | None = None

    def to_info(self) -> dict[str, Any]:
        """Return the key-file dict expected by google-auth (None fields dropped)."""
        return self.model_dump(exclude_none=True)


class AppConfig(BaseModel):
    """Configuration for one FirebaseApp instance."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(alias="database")
    credentials: ServiceAccountCredentials
    token_ttl_seconds: float = Field(default=DEFAULT_TOKEN_TTL_SECONDS, gt=0)
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    row_id_strategy: RowIdStrategy = "server"

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        if not value:
            raise ValueError("base_url must be a non-empty URL")
        return value.rstrip("/")


class Settings(BaseSettings):
    """Environment settings (FIREBASE_* variables and .env).

    Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) or,
    when that is unset, from FIREBASE_SERVICE_ACCOUNT_PATH (path to the key file).
    """

    database_url: str = ""
    service_account_key: SecretStr | None = None
    service_account_path: str | None = None

    token_ttl_seconds: float = DEFAULT_TOKEN_TTL_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    row_id_strategy: RowIdStrategy = "server"

    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def load_credentials(self) -> ServiceAccountCredentials:
        """Return service account credentials from the env key or the key file."""
        key_json = (
            self.service_account_key.get_secret_value()
            if self.service_account_key
            else None
        )
        if key_json:
            try:
                data = json.loads(key_json)
            except json.JSONDecodeError as e:
                raise ConfigurationException(
                    "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON"
                ) from e
        elif self.service_account_path:
            path = Path(self.service_account_path).expanduser()
            if not path.is_file():
                raise ConfigurationException(
                    f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path}",
                    setting="service_account_path",
                )
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationException(
                    f"Service account file is not valid JSON: {path}",
                    setting="service_account_path",
                ) from e
        else:
            raise ConfigurationException(
                "Set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
            )
        try:
            return ServiceAccountCredentials.model_validate(data)
        except ValueError as e:
            raise ConfigurationException(
                f"Service account JSON is missing required fields: {e}"
            ) from e

    def to_app_config(self) -> AppConfig:
        """Build an AppConfig from these settings."""
        if not self.database_url:
            raise ConfigurationException(
                "FIREBASE_DATABASE_URL is required "
                "(e.g. https://<project>-default-rtdb.firebaseio.com).",
                setting="database_url",
            )
        return AppConfig(
            base_url=self.database_url,
            credentials=self.load_credentials(),
            token_ttl_seconds=self.token_ttl_seconds,
            request_timeout_seconds=self.request_timeout_seconds,
            row_id_strategy=self.row_id_strategy,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() after overriding env vars so the
    next get_settings() picks up the new values.
    """
    return Settings()
