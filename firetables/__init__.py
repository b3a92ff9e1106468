"""firetables: schema-validated collections and tables over the Firebase
Realtime Database REST API."""

from firetables.app import FirebaseApp
from firetables.application import (
    CollectionAccessor,
    Invalid,
    JsonSchema,
    SchemaGate,
    TableAccessor,
    Valid,
)
from firetables.core.config import AppConfig, ServiceAccountCredentials, Settings
from firetables.domain.exceptions import (
    AuthenticationError,
    AuthenticationException,
    ConfigurationException,
    FiretablesException,
    SchemaValidationException,
    TransportError,
    TransportException,
    ValidationError,
)
from firetables.domain.outcomes import NO_CHANGE, NoChange, Replace

__all__ = [
    "AppConfig",
    "AuthenticationError",
    "AuthenticationException",
    "CollectionAccessor",
    "ConfigurationException",
    "FirebaseApp",
    "FiretablesException",
    "Invalid",
    "JsonSchema",
    "NO_CHANGE",
    "NoChange",
    "Replace",
    "SchemaGate",
    "SchemaValidationException",
    "ServiceAccountCredentials",
    "Settings",
    "TableAccessor",
    "TransportError",
    "TransportException",
    "Valid",
    "ValidationError",
]
