"""
Core package aggregator for the Orqui contract engine (hashing, tokens, cascade, envelopes, registry).

## Contracts (single source of truth)
- Grammar — schema/region/header enums, token reference parsing.
- Schema — token record models, envelope meta, structural warnings.
- Hashing/Serde — canonical JSON and the "sha256:<hex>" content digest.
- Tokens — "$tokens.<category>.<key>" resolution and CSS helpers.
- Cascade — base + per-page override merge (explicit Set/UNSET overrides).
- Envelope — wrap/unwrap for export/import, advisory structural validation.
- Registry — component name normalization.
- Migrations/Versioning — semver metadata and explicit upgrade steps.

## Notes
- Zero‑IO policy: stdlib + pydantic only; no file/network IO.
- Resolution, cascade, and normalization are total: they never raise.
- Import failures raise SchemaMismatch or MalformedInput (see errors).

## Downstream usage
- orqui.io — persists envelopes produced by `wrap` and feeds `parse_contract`.
- orqui.cli — exposes hashing, export/import, page resolution, and token tables.
- Preview/render code — calls `effective_document`, `resolve_scalar`, `resolve_composite`.

## Examples
```python
from orqui.core import digest, effective_region, resolve_scalar, unwrap, wrap

resolve_scalar("$tokens.spacing.md", {"spacing": {"md": {"value": 16, "unit": "px"}}})  # '16px'

base = {"behavior": {"fixed": True, "collapsible": False, "scrollable": True}}
effective_region(base, {"behavior": {"collapsible": True}})["behavior"]
# {'fixed': True, 'collapsible': True, 'scrollable': True}

env = wrap({"tokens": {}}, "layout-contract", "2.0.0")
env["hash"] == digest({"tokens": {}})  # True
unwrap(env).document  # {'tokens': {}}
```
"""

from __future__ import annotations

from .cascade import effective_document, effective_region, resolve_page_layout
from .envelope import parse_contract, unwrap, validate_structure, wrap
from .errors import ContractError, HashMismatch, MalformedInput, SchemaMismatch, VersionMismatch
from .grammar import ContractSchema
from .hashing import canonicalize, digest
from .registry import normalize
from .tokens import resolve_composite, resolve_scalar

__all__ = [
    "canonicalize",
    "digest",
    "resolve_scalar",
    "resolve_composite",
    "effective_region",
    "effective_document",
    "resolve_page_layout",
    "wrap",
    "unwrap",
    "parse_contract",
    "validate_structure",
    "normalize",
    "ContractSchema",
    "ContractError",
    "SchemaMismatch",
    "MalformedInput",
    "HashMismatch",
    "VersionMismatch",
]
