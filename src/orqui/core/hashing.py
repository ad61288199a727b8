"""
Canonical JSON serialization and content hashing for contract documents.

Provides a single canonicalization policy and the SHA-256 content digest used as
a contract's identity/version fingerprint. Two documents with identical
field/value content produce byte-identical canonical text regardless of key
insertion order, and therefore the same digest. This module is zero-IO and uses
only the Python standard library.

Notes:
    - Canonical JSON:
        - object keys sorted ascending (ordinal on the key string) at every depth
        - array element order preserved
        - separators=(",", ":")
        - ensure_ascii=False
    - No numeric, whitespace, or string normalization is applied; only key order.
    - Hashing is performed over the UTF-8 encoded canonical JSON string and rendered
      as "sha256:<64 lowercase hex chars>".
    - All functions are pure and safe to call concurrently.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from .constants import HASH_ALGORITHM
from .typing import Digest

__all__ = [
    "canonical_form",
    "canonicalize",
    "json_dumps_canonical",
    "digest",
    "is_digest",
]

_HEX_DIGITS = frozenset("0123456789abcdef")


def canonical_form(obj: Any) -> Any:
    """
    Return a structural copy of ``obj`` with mapping keys sorted at every depth.

    Args:
        obj (Any): JSON-like value (mapping, list/tuple, or primitive).

    Returns:
        Any: Lists recurse per element in their original order; mappings become
        new dicts with keys inserted in ascending order; ``None`` and other
        primitives are returned unchanged.

    Examples:
        >>> list(canonical_form({"b": 1, "a": {"d": 2, "c": 3}}))
        ['a', 'b']
        >>> canonical_form([]) == [] and canonical_form({}) == {}
        True
    """
    if isinstance(obj, Mapping):
        return {key: canonical_form(obj[key]) for key in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [canonical_form(item) for item in obj]
    return obj


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sorted keys, compact separators,
        and ensure_ascii=False.

    Notes:
        This function assumes the input is JSON-serializable and does not perform
        coercion of unsupported types.
    """
    return json.dumps(
        canonical_form(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def canonicalize(doc: Any) -> str:
    """
    Canonical serialization of a contract document; the hashing input.

    Args:
        doc (Any): Contract document (or any JSON-like value).

    Returns:
        str: Canonical JSON text.

    Examples:
        >>> canonicalize({"b": 2, "a": [3, {"y": 1, "x": 0}]})
        '{"a":[3,{"x":0,"y":1}],"b":2}'
    """
    return json_dumps_canonical(doc)


def _sha256_hexdigest(s: str) -> str:
    """Compute SHA-256 hex digest of a UTF-8 string."""
    h = hashlib.sha256()
    h.update(s.encode("utf-8"))
    return h.hexdigest()


def digest(doc: Any) -> Digest:
    """
    Compute the content digest of a document over its canonical serialization.

    Args:
        doc (Any): Contract document to fingerprint.

    Returns:
        str: ``"sha256:"`` followed by 64 lowercase hex characters.

    Notes:
        ``digest(a) == digest(b)`` iff ``canonicalize(a) == canonicalize(b)``.

    Examples:
        >>> digest({"a": 1, "b": 2}) == digest({"b": 2, "a": 1})
        True
        >>> digest({}).startswith("sha256:")
        True
    """
    return Digest(f"{HASH_ALGORITHM}:{_sha256_hexdigest(canonicalize(doc))}")


def is_digest(value: Any) -> bool:
    """Return True if ``value`` looks like a digest produced by :func:`digest`."""
    if not isinstance(value, str):
        return False
    algo, sep, hexpart = value.partition(":")
    return bool(sep) and algo == HASH_ALGORITHM and len(hexpart) == 64 and set(hexpart) <= _HEX_DIGITS
