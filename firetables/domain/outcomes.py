"""Outcomes returned by update and transition callbacks.

A callback answers with Replace(document) to write, or NO_CHANGE to leave the
stored value untouched. Plain mappings, None and False are accepted too and
normalized by as_outcome().
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final


@dataclass(frozen=True)
class Replace:
    """Write these fields (merged into an existing node, or as the full node)."""

    document: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NoChange:
    """Leave the stored value as it is."""


NO_CHANGE: Final = NoChange()

UpdateOutcome = Replace | NoChange


def as_outcome(result: Any) -> UpdateOutcome:
    """Normalize a callback result to Replace or NoChange.

    Raises:
        TypeError: If the result is neither an outcome, a mapping, nor None/False.
    """
    if isinstance(result, (Replace, NoChange)):
        return result
    if result is None or result is False:
        return NO_CHANGE
    if isinstance(result, Mapping):
        return Replace(result)
    raise TypeError(
        f"Update callback must return Replace, NO_CHANGE, a mapping or None; "
        f"got {type(result).__name__}"
    )
