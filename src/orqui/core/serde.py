"""
Lightweight JSON serialization/deserialization utilities.

Provides `json_loads` as a thin wrapper around the stdlib `json` module that maps
parse failures to `MalformedInput`, `json_dumps_pretty` for human-facing export
files, and re-exports `json_dumps_canonical` from `orqui.core.hashing` to ensure a
single canonical JSON policy across the codebase. This module is zero-IO.

Notes:
    - Use `json_dumps_canonical` for deterministic JSON strings prior to hashing.
    - Pretty output preserves key insertion order so envelope meta fields stay first.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import MalformedInput

# Re-export canonical dumps to keep a single canonicalization policy.
from .hashing import json_dumps_canonical  # noqa: F401

__all__ = [
    "json_loads",
    "json_dumps_canonical",
    "json_dumps_pretty",
]


def json_loads(s: str | bytes) -> Any:
    """
    Deserialize JSON text to Python objects.

    Args:
        s (str | bytes): JSON text to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).

    Raises:
        orqui.core.errors.MalformedInput: If the text is not valid JSON.
    """
    try:
        return json.loads(s)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise MalformedInput(f"invalid JSON: {exc}") from exc


def json_dumps_pretty(obj: Any, indent: int = 2) -> str:
    """
    Serialize an object to indented JSON, keeping key insertion order.

    Args:
        obj (Any): JSON-serializable object.
        indent (int): Indentation width.

    Returns:
        str: JSON text terminated by a newline.
    """
    return json.dumps(obj, indent=indent, ensure_ascii=False) + "\n"
