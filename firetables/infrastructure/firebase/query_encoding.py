"""Encode Realtime Database REST query parameters.

Filter values must be JSON literals in the query string: strings are quoted
(equalTo="Pen"), numbers and booleans are bare (limitToFirst=5). The output
control parameters (print, format, timeout) take plain words instead.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from firetables.core.constants import QUERY_KEYS, RAW_QUERY_KEYS


def _encode_value(key: str, value: Any) -> str:
    if key in RAW_QUERY_KEYS:
        return value if isinstance(value, str) else json.dumps(value)
    # json.dumps on a str gives the quoted, escaped literal the store expects.
    return json.dumps(value)


def encode_query(params: Mapping[str, Any]) -> str:
    """Return the query string for the given parameters.

    Every present key is emitted; a None value is sent as the JSON literal null.

    Raises:
        ValueError: If a key is not a supported query parameter.
    """
    unknown = set(params) - QUERY_KEYS
    if unknown:
        raise ValueError(
            f"Unsupported query parameter(s): {', '.join(sorted(unknown))}. "
            f"Supported: {', '.join(sorted(QUERY_KEYS))}"
        )
    pairs = [(key, _encode_value(key, value)) for key, value in params.items()]
    return urlencode(pairs)


def equal_to(field: str, value: Any) -> dict[str, Any]:
    """Query for children whose ``field`` equals ``value``."""
    return {"orderBy": field, "equalTo": value}


__all__ = ["encode_query", "equal_to"]
