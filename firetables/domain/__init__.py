"""Domain layer: exceptions and update outcomes.

No dependencies on infrastructure. Used by the application and
infrastructure layers.
"""

from firetables.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    FiretablesException,
    SchemaValidationException,
    TransportException,
)
from firetables.domain.outcomes import NO_CHANGE, NoChange, Replace, as_outcome

__all__ = [
    # Exceptions
    "AuthenticationException",
    "ConfigurationException",
    "FiretablesException",
    "SchemaValidationException",
    "TransportException",
    # Outcomes
    "NO_CHANGE",
    "NoChange",
    "Replace",
    "as_outcome",
]
