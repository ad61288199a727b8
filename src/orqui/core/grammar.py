"""
Canonical contract grammar and helpers.

Defines contract schema names, region names and header element names,
together with the token reference grammar used throughout layout documents.

Responsibilities
- Define enums whose `.value` is the exact wire string used in contract JSON.
- Parse and format token references ("$tokens.<category>.<key...>").
- Map an envelope schema tag to a ContractSchema (raising SchemaMismatch).

Token reference grammar
-----------------------
    token_ref := "$tokens." category "." key
    category  := 1*( any character except "." )
    key       := 1*( any character )          ; may itself contain "."

The first path segment after the prefix is the category; all remaining
segments joined with "." form the key, so "$tokens.sizing.sidebar-width" and
"$tokens.spacing.1.5" are both valid references.

Notes
- Parsing is total: anything that does not match returns None, never raises.
- Enum values follow the editor's camelCase/kebab-case wire format, not lower_snake.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import TOKEN_REF_PREFIX
from .errors import SchemaMismatch

__all__ = [
    "ContractSchema",
    "Region",
    "HeaderElement",
    "REGION_NAMES",
    "HEADER_ELEMENT_NAMES",
    "TokenRef",
    "parse_token_ref",
    "is_token_ref",
    "format_token_ref",
    "schema_from_value",
]


class ContractSchema(Enum):
    """Schema names carried in the envelope `schema` field."""

    LAYOUT_CONTRACT = "layout-contract"
    UI_REGISTRY_CONTRACT = "ui-registry-contract"


class Region(Enum):
    """Named layout regions of the structural document."""

    SIDEBAR = "sidebar"
    HEADER = "header"
    MAIN = "main"
    FOOTER = "footer"


class HeaderElement(Enum):
    """Named header elements that page overrides may toggle."""

    SEARCH = "search"
    CTA = "cta"
    ICONS = "icons"


# Iteration order used by the cascade and validation.
REGION_NAMES: tuple[str, ...] = tuple(r.value for r in Region)
HEADER_ELEMENT_NAMES: tuple[str, ...] = tuple(e.value for e in HeaderElement)


@dataclass(frozen=True)
class TokenRef:
    """
    Parsed token reference.

    Attributes:
        category (str): Token table category (first path segment).
        key (str): Token key within the category (may contain dots).
    """

    category: str
    key: str

    def __str__(self) -> str:
        return format_token_ref(self.category, self.key)


def parse_token_ref(ref: Any) -> TokenRef | None:
    """
    Parse a token reference string.

    Args:
        ref (Any): Candidate reference; non-strings are accepted and yield None.

    Returns:
        TokenRef | None: Parsed reference, or None when ``ref`` is not a
        well-formed "$tokens.<category>.<key>" string.

    Examples:
        >>> parse_token_ref("$tokens.sizing.sidebar-width")
        TokenRef(category='sizing', key='sidebar-width')
        >>> parse_token_ref("$tokens.spacing.1.5").key
        '1.5'
        >>> parse_token_ref("$tokens.") is None
        True
    """
    if not isinstance(ref, str) or not ref.startswith(TOKEN_REF_PREFIX):
        return None
    category, sep, key = ref[len(TOKEN_REF_PREFIX) :].partition(".")
    if not category or not sep or not key:
        return None
    return TokenRef(category=category, key=key)


def is_token_ref(value: Any) -> bool:
    """Return True if ``value`` is a well-formed token reference string."""
    return parse_token_ref(value) is not None


def format_token_ref(category: str, key: str) -> str:
    """
    Build a token reference string.

    Examples:
        >>> format_token_ref("spacing", "md")
        '$tokens.spacing.md'
    """
    return f"{TOKEN_REF_PREFIX}{category}.{key}"


def schema_from_value(value: Any) -> ContractSchema:
    """
    Map an envelope schema tag to a ContractSchema.

    Args:
        value (Any): Raw `schema` field value (may be missing/None).

    Returns:
        ContractSchema: Matching schema.

    Raises:
        orqui.core.errors.SchemaMismatch: If the tag is absent or unknown.
    """
    if isinstance(value, ContractSchema):
        return value
    if isinstance(value, str):
        for member in ContractSchema:
            if member.value == value:
                return member
    raise SchemaMismatch(value)
