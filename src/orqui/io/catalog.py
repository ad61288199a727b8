"""
Tabular views over a contract's design tokens (Polars).

Responsibilities
- Flatten a token table ({category: {key: record}}) into a Polars DataFrame with one row
  per token: category, key, reference string, CSS value, and record kind.
- Keep row order deterministic (sorted by category, then key).

Notes
- Malformed records still produce a row; their css/kind columns are null.
- Consumers: orqui.cli `tokens` command (printed head) and tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import polars as pl

from orqui.core.grammar import format_token_ref
from orqui.core.schema import FontFamilyToken, RawToken, SizedToken, UnitlessToken, parse_token_record
from orqui.core.tokens import token_to_css

__all__ = ["TOKEN_FRAME_SCHEMA", "token_frame"]

TOKEN_FRAME_SCHEMA: dict[str, Any] = {
    "category": pl.String,
    "key": pl.String,
    "ref": pl.String,
    "css": pl.String,
    "kind": pl.String,
}


def _kind(raw: Any) -> str | None:
    record = parse_token_record(raw)
    if isinstance(record, SizedToken):
        return "sized"
    if isinstance(record, UnitlessToken):
        return "unitless"
    if isinstance(record, FontFamilyToken):
        return "font-family"
    if isinstance(record, RawToken):
        return "raw"
    return None


def token_frame(tokens: Mapping[str, Any] | None) -> pl.DataFrame:
    """
    Build a DataFrame listing every token in ``tokens``.

    Args:
        tokens: Token table as found under a layout contract's "tokens" key.

    Returns:
        pl.DataFrame: Columns category, key, ref, css, kind (all String); empty with
        the same schema when there are no tokens.

    Examples:
        >>> df = token_frame({"spacing": {"md": {"value": 16, "unit": "px"}}})
        >>> df.row(0)
        ('spacing', 'md', '$tokens.spacing.md', '16px', 'sized')
    """
    rows: list[dict[str, Any]] = []
    if isinstance(tokens, Mapping):
        for category in sorted(tokens):
            entries = tokens[category]
            if not isinstance(entries, Mapping):
                continue
            for key in sorted(entries):
                raw = entries[key]
                rows.append(
                    {
                        "category": category,
                        "key": key,
                        "ref": format_token_ref(category, key),
                        "css": token_to_css(raw),
                        "kind": _kind(raw),
                    }
                )
    return pl.DataFrame(rows, schema=TOKEN_FRAME_SCHEMA)
