"""Exceptions raised by firetables.

Every error carries a human-readable message, a machine-readable error_code
and a details dict. Absent nodes are never errors: reads return None or [].
"""

from typing import Any


class FiretablesException(Exception):
    """Base exception for all firetables errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. path, status_code, errors).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class SchemaValidationException(FiretablesException):
    """Raised when a document fails schema validation, before any write is sent."""

    def __init__(self, schema_name: str, validation_errors: list[dict[str, Any]]) -> None:
        """Initialize with schema name and field-level errors.

        Args:
            schema_name: Name of the schema model that rejected the value.
            validation_errors: One dict per offending field (field, message, type).
        """
        fields = ", ".join(e["field"] or "<root>" for e in validation_errors)
        super().__init__(
            f"Schema validation failed for {schema_name}: {fields}",
            "SCHEMA_VALIDATION_ERROR",
            {"schema": schema_name, "errors": validation_errors},
        )

    @property
    def errors(self) -> list[dict[str, Any]]:
        return self.details["errors"]


class AuthenticationException(FiretablesException):
    """Raised when the auth provider cannot produce an access token."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class TransportException(FiretablesException):
    """Raised on network failure or a non-success response from the database."""

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int | None = None,
        body: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize with request context.

        Args:
            method: HTTP method of the failed request.
            path: Database path (without base URL or .json suffix).
            status_code: HTTP status, or None when no response was received.
            body: Response body text, when available.
            reason: Network-level failure description when no response was received.
        """
        if status_code is not None:
            message = f"{method} {path} failed with status {status_code}"
        else:
            message = f"{method} {path} failed: {reason or 'network error'}"
        super().__init__(
            message,
            "TRANSPORT_ERROR",
            {
                "method": method,
                "path": path,
                "status_code": status_code,
                "body": body,
            },
        )

    @property
    def status_code(self) -> int | None:
        return self.details["status_code"]


class ConfigurationException(FiretablesException):
    """Raised when settings cannot produce a usable configuration."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


ValidationError = SchemaValidationException
AuthenticationError = AuthenticationException
TransportError = TransportException
