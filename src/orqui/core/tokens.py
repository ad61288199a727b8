"""
Token resolution: symbolic "$tokens.<category>.<key>" references to concrete values.

Responsibilities
- resolve_scalar: one reference → sized string ("16px"), bare value, or None.
- resolve_composite: a composite style (e.g. a text style) → flat value map,
  resolving each field independently.
- CSS helpers used by preview/render code: font stacks, CSS custom properties,
  and a ":root" block for a whole token table.

Resolution policy
-----------------
| Record shape     | resolve_scalar         | resolve_composite            |
|------------------|------------------------|------------------------------|
| SizedToken       | "<value><unit>"        | "<value><unit>"              |
| UnitlessToken    | value (number)         | value (number)               |
| RawToken         | value (string)         | value (string)               |
| FontFamilyToken  | None                   | "'<family>', <fallbacks...>" |
| missing/invalid  | None                   | field omitted                |

Notes
- Total: no function in this module raises for any input; an unresolved
  reference is "not set" so the editor keeps working on partial documents.
- Zero-IO; inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .constants import CSS_VAR_PREFIX, DEFAULT_FONT_FALLBACK, TOKEN_REF_PREFIX
from .grammar import TokenRef, parse_token_ref
from .schema import (
    FontFamilyToken,
    RawToken,
    SizedToken,
    TokenRecord,
    UnitlessToken,
    parse_token_record,
)

__all__ = [
    "lookup_token",
    "resolve_scalar",
    "resolve_composite",
    "resolve_text_styles",
    "font_stack",
    "token_to_css",
    "css_var",
    "css_variables",
    "build_root_block",
]

logger = logging.getLogger(__name__)


def _css_number(value: int | float) -> int | float:
    # JSON numbers like 16.0 render as "16" in the editor; keep that.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def lookup_token(ref: TokenRef, table: Any) -> TokenRecord | None:
    """
    Look up the record a parsed reference points at.

    Args:
        ref (TokenRef): Parsed reference.
        table (Any): Token table (category → key → record); non-mappings yield None.

    Returns:
        TokenRecord | None: Classified record or None when absent/unrecognized.
    """
    if not isinstance(table, Mapping):
        return None
    category = table.get(ref.category)
    if not isinstance(category, Mapping):
        return None
    return parse_token_record(category.get(ref.key))


def font_stack(record: FontFamilyToken) -> str:
    """
    Render a font family token as a CSS font stack.

    Examples:
        >>> font_stack(FontFamilyToken(family="Inter", fallbacks=["sans-serif"]))
        "'Inter', sans-serif"
    """
    fallbacks = ", ".join(record.fallbacks) or DEFAULT_FONT_FALLBACK
    return f"'{record.family}', {fallbacks}"


def _scalar_value(record: TokenRecord) -> Any:
    if isinstance(record, SizedToken):
        return f"{_css_number(record.value)}{record.unit}"
    if isinstance(record, (UnitlessToken, RawToken)):
        return record.value
    return None


def resolve_scalar(ref: Any, table: Any) -> Any:
    """
    Resolve a single token reference to a concrete value.

    Args:
        ref (Any): Candidate reference string.
        table (Any): Token table.

    Returns:
        Any: "<value><unit>" for sized tokens, the bare value for unitless or raw
        tokens, and None for font-family tokens, malformed references, and
        references that do not resolve.

    Examples:
        >>> resolve_scalar("$tokens.spacing.md", {"spacing": {"md": {"value": 16, "unit": "px"}}})
        '16px'
        >>> resolve_scalar("not-a-token", {}) is None
        True
    """
    parsed = parse_token_ref(ref)
    if parsed is None:
        return None
    record = lookup_token(parsed, table)
    if record is None:
        logger.debug("unresolved token reference %r", ref)
        return None
    return _scalar_value(record)


def _composite_value(ref: TokenRef, table: Any) -> Any:
    record = lookup_token(ref, table)
    if isinstance(record, FontFamilyToken):
        return font_stack(record)
    if record is None:
        return None
    return _scalar_value(record)


def resolve_composite(style: Any, table: Any) -> dict[str, Any]:
    """
    Resolve every token reference in a composite style into a flat value map.

    Args:
        style (Any): Mapping of field name → literal or token reference.
        table (Any): Token table.

    Returns:
        dict[str, Any]: Field → resolved value. Literal (non-reference) values,
        including None, pass through unchanged; fields whose reference does not
        resolve are absent.

    Examples:
        >>> table = {"fontFamilies": {"primary": {"family": "Inter", "fallbacks": ["sans-serif"]}}}
        >>> resolve_composite({"fontFamily": "$tokens.fontFamilies.primary"}, table)
        {'fontFamily': "'Inter', sans-serif"}
    """
    if not isinstance(style, Mapping):
        return {}
    out: dict[str, Any] = {}
    for field, value in style.items():
        if isinstance(value, str) and value.startswith(TOKEN_REF_PREFIX):
            parsed = parse_token_ref(value)
            resolved = _composite_value(parsed, table) if parsed is not None else None
            if resolved is None:
                logger.debug("field %r: unresolved token reference %r", field, value)
                continue
            out[field] = resolved
        else:
            out[field] = value
    return out


def resolve_text_styles(layout: Any) -> dict[str, dict[str, Any]]:
    """
    Resolve every text style of a layout contract against its token table.

    Args:
        layout (Any): Layout document carrying ``textStyles`` and ``tokens``.

    Returns:
        dict[str, dict[str, Any]]: Style name → resolved value map.
    """
    if not isinstance(layout, Mapping):
        return {}
    styles = layout.get("textStyles")
    if not isinstance(styles, Mapping):
        return {}
    tokens = layout.get("tokens")
    return {name: resolve_composite(style, tokens) for name, style in styles.items()}


def token_to_css(raw: Any) -> str | None:
    """
    Render a raw token record as a CSS value string.

    Returns:
        str | None: Font stack for family tokens, "<value><unit>" for sized
        tokens, ``str(value)`` otherwise; None for unrecognized records.
    """
    record = parse_token_record(raw)
    if record is None:
        return None
    if isinstance(record, FontFamilyToken):
        return font_stack(record)
    value = _scalar_value(record)
    if isinstance(value, (int, float)):
        return str(_css_number(value))
    return str(value)


def css_var(category: str, key: str) -> str:
    """
    CSS custom property reference for a token.

    Examples:
        >>> css_var("spacing", "md")
        'var(--orqui-spacing-md)'
    """
    return f"var({CSS_VAR_PREFIX}-{category}-{key})"


def css_variables(table: Any) -> dict[str, str]:
    """
    Flatten a token table into CSS custom property declarations.

    Args:
        table (Any): Token table.

    Returns:
        dict[str, str]: "--orqui-<category>-<key>" → CSS value, in table order.
        Unrecognized records are skipped.
    """
    out: dict[str, str] = {}
    if not isinstance(table, Mapping):
        return out
    for category, entries in table.items():
        if not isinstance(entries, Mapping):
            continue
        for key, raw in entries.items():
            css = token_to_css(raw)
            if css is not None:
                out[f"{CSS_VAR_PREFIX}-{category}-{key}"] = css
    return out


def build_root_block(table: Any) -> str:
    """
    Render a ``:root { ... }`` CSS block declaring every token as a custom property.

    Examples:
        >>> print(build_root_block({"spacing": {"md": {"value": 16, "unit": "px"}}}))
        :root {
          --orqui-spacing-md: 16px;
        }
    """
    lines = [":root {"]
    lines.extend(f"  {name}: {value};" for name, value in css_variables(table).items())
    lines.append("}")
    return "\n".join(lines)
