"""
Orqui core constants shared by the resolver, cascade, and envelope modules.

Defines the token reference prefix, the nested maps that merge key-by-key, and the envelope
meta field names. This module is zero-IO and uses only the Python standard library.

Notes:
    - Changes to META_FIELDS change the envelope wire shape; bump the contract
      version and add a migration when doing so.
"""

from __future__ import annotations

__all__ = [
    "TOKEN_REF_PREFIX",
    "HASH_ALGORITHM",
    "NESTED_MERGE_FIELDS",
    "META_FIELDS",
    "CSS_VAR_PREFIX",
    "DEFAULT_FONT_FALLBACK",
]

# Token references look like "$tokens.<category>.<key...>".
TOKEN_REF_PREFIX: str = "$tokens."

# Algorithm tag prefixed to every content digest ("sha256:<hex>").
HASH_ALGORITHM: str = "sha256"

# Region sub-objects that cascade per inner key instead of being replaced wholesale.
NESTED_MERGE_FIELDS: frozenset[str] = frozenset({"behavior", "dimensions", "padding"})

# Envelope fields stripped on import; order is the order they are emitted on export.
META_FIELDS: tuple[str, ...] = ("schema", "version", "hash", "generatedAt")

CSS_VAR_PREFIX: str = "--orqui"

# Used when a font-family token carries no fallbacks.
DEFAULT_FONT_FALLBACK: str = "sans-serif"
