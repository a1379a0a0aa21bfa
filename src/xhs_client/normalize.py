"""
Key normalization for page-state data.

Notes embedded in the explore page come with camelCase keys, while the JSON
API uses snake_case. These helpers convert the former into the latter.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .models import JSONValue

_UPPER = re.compile(r"([A-Z])")

# Matches: window.__INITIAL_STATE__={...}</script>
_INITIAL_STATE = re.compile(r"window.__INITIAL_STATE__=({.*})</script>")


def camel_to_underscore(key: str) -> str:
    """
    Convert a camelCase key to snake_case.

    Examples:
        >>> camel_to_underscore("noteDetailMap")
        'note_detail_map'
        >>> camel_to_underscore("likedCount")
        'liked_count'
    """
    return _UPPER.sub(r"_\1", key).lower()


def _normalize_dict(data: dict[str, Any]) -> dict[str, JSONValue]:
    result: dict[str, JSONValue] = {}
    for key, value in data.items():
        new_key = camel_to_underscore(key)
        if not value:
            result[new_key] = value
        elif isinstance(value, dict):
            result[new_key] = _normalize_dict(value)
        elif isinstance(value, list):
            result[new_key] = _normalize_list(value)
        else:
            result[new_key] = value
    return result


def _normalize_list(items: list[Any]) -> list[JSONValue]:
    return [_normalize_dict(item) if isinstance(item, dict) else item for item in items]


def normalize_keys(node: JSONValue) -> JSONValue:
    """
    Recursively rewrite object keys from camelCase to snake_case.

    Nested objects are rewritten; lists have their object elements rewritten
    while other elements are returned unchanged. The input is not modified.
    """
    if isinstance(node, dict):
        return _normalize_dict(node)
    if isinstance(node, list):
        return _normalize_list(node)
    return node


def extract_initial_state(html: str) -> dict[str, JSONValue] | None:
    """
    Extract and normalize the ``window.__INITIAL_STATE__`` blob from a page.

    Returns:
        The normalized state, or None if the page carries no usable state
    """
    match = _INITIAL_STATE.search(html)
    if not match:
        return None

    state = match.group(1).replace("undefined", '""')
    if state == "{}":
        return None

    return _normalize_dict(json.loads(state))
