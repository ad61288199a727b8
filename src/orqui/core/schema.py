"""
Pydantic v2 models for token records, envelope metadata, and structural warnings.

Responsibilities
- Define the four token record shapes a token table may hold and a total parser
  that classifies a raw record into one of them (or None).
- Define the envelope meta model used by the Contract Envelope Manager.
- Define the advisory StructureWarning returned by structural validation.

Style
- Zero-IO (stdlib + pydantic only).
- Token records allow extra fields (editors attach descriptions, notes, etc.).
- Contract documents themselves stay duck-typed dicts; only the small, fixed
  shapes above are modeled.

Token record shapes
-------------------
| Shape            | Fields                          | Example                                   |
|------------------|---------------------------------|-------------------------------------------|
| SizedToken       | value: number, unit: str        | {"value": 16, "unit": "px"}               |
| UnitlessToken    | value: number                   | {"value": 1.5}                            |
| FontFamilyToken  | family: str, fallbacks: [str]   | {"family": "Inter", "fallbacks": [...]}   |
| RawToken         | value: str                      | {"value": "#6d9cff"}                      |

A bare string record (e.g. a color stored as "#fff") is read as a RawToken.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .grammar import ContractSchema

__all__ = [
    "SizedToken",
    "UnitlessToken",
    "FontFamilyToken",
    "RawToken",
    "TokenRecord",
    "parse_token_record",
    "EnvelopeMeta",
    "StructureWarning",
]


class SizedToken(BaseModel):
    """
    Numeric token with a CSS unit.

    Attributes:
        value (int | float): Magnitude.
        unit (str): CSS unit suffix ("px", "em", "vh", ...).

    Examples:
        >>> SizedToken(value=16, unit="px").value
        16
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    value: int | float
    unit: str


class UnitlessToken(BaseModel):
    """Numeric token without a unit (font weights, line heights)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    value: int | float


class FontFamilyToken(BaseModel):
    """
    Font family token.

    Attributes:
        family (str): Primary family name.
        fallbacks (list[str]): Ordered fallback families.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    family: str
    fallbacks: list[str] = Field(default_factory=list)


class RawToken(BaseModel):
    """String-valued token (colors, shadows, raw CSS)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    value: str


TokenRecord = SizedToken | UnitlessToken | FontFamilyToken | RawToken


def parse_token_record(raw: Any) -> TokenRecord | None:
    """
    Classify a raw token table entry into a token record model.

    Args:
        raw (Any): Entry from ``table[category][key]``.

    Returns:
        TokenRecord | None: The matching model, or None when the entry has none
        of the known shapes or fails validation.

    Notes:
        Classification is by field presence: ``family`` wins, then
        ``value`` + ``unit``, then ``value`` alone (string → RawToken,
        number → UnitlessToken). Never raises.

    Examples:
        >>> parse_token_record({"value": 16, "unit": "px"})
        SizedToken(value=16, unit='px')
        >>> parse_token_record({"oops": 1}) is None
        True
    """
    if isinstance(raw, str):
        return RawToken(value=raw)
    if not isinstance(raw, Mapping):
        return None
    try:
        if "family" in raw:
            return FontFamilyToken.model_validate(dict(raw))
        if "value" in raw and "unit" in raw:
            return SizedToken.model_validate(dict(raw))
        if "value" in raw:
            if isinstance(raw["value"], str):
                return RawToken.model_validate(dict(raw))
            if isinstance(raw["value"], bool):
                return None
            return UnitlessToken.model_validate(dict(raw))
    except ValidationError:
        return None
    return None


class EnvelopeMeta(BaseModel):
    """
    Envelope metadata stripped from a contract on import.

    Attributes:
        schema_name (ContractSchema): Contract schema (wire key "schema").
        version (str | None): Semantic version string as recorded.
        hash (str | None): Content digest as recorded ("sha256:<hex>").
        generated_at (str | None): ISO-8601 timestamp (wire key "generatedAt").

    Notes:
        Only the schema is required; the other fields are advisory provenance and
        are carried through verbatim.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_name: ContractSchema = Field(alias="schema")
    version: str | None = None
    hash: str | None = None
    generated_at: str | None = Field(default=None, alias="generatedAt")

    def to_wire(self) -> dict[str, Any]:
        """Return the meta fields keyed by their wire names."""
        return self.model_dump(by_alias=True, mode="json")


class StructureWarning(BaseModel):
    """
    Non-fatal structural finding reported by validate_structure.

    Attributes:
        path (str): Dotted path of the offending location ("structure.regions").
        message (str): Human-readable description.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"
