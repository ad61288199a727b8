"""Tests for `orqui.core.envelope` wrap/unwrap and structural validation."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from orqui.core.envelope import parse_contract, unwrap, validate_structure, wrap
from orqui.core.errors import HashMismatch, MalformedInput, SchemaMismatch
from orqui.core.grammar import ContractSchema
from orqui.core.hashing import digest

LAYOUT = {
    "structure": {
        "regions": {"sidebar": {"enabled": True, "dimensions": {"width": "$tokens.sizing.sidebar-width"}}},
        "pages": {"home": {"label": "Home", "route": "/", "overrides": {}}},
    },
    "tokens": {"sizing": {"sidebar-width": {"value": 260, "unit": "px"}}},
}


def _fixed_now() -> datetime:
    return datetime(2025, 1, 2, 3, 4, 5, 678901, tzinfo=UTC)


def test_wrap_stamps_meta_first() -> None:
    env = wrap(LAYOUT, "layout-contract", "2.0.0", now=_fixed_now)
    assert list(env)[:4] == ["schema", "version", "hash", "generatedAt"]
    assert env["schema"] == "layout-contract"
    assert env["version"] == "2.0.0"
    assert env["hash"] == digest(LAYOUT)
    assert env["generatedAt"] == "2025-01-02T03:04:05.678Z"
    assert env["structure"] == LAYOUT["structure"]


def test_wrap_normalizes_timestamp_to_utc() -> None:
    plus_two = timezone(timedelta(hours=2))
    env = wrap({}, "layout-contract", "2.0.0", now=lambda: datetime(2025, 1, 1, 12, 0, tzinfo=plus_two))
    assert env["generatedAt"] == "2025-01-01T10:00:00.000Z"


def test_wrap_drops_stale_meta_from_document() -> None:
    stale = {**LAYOUT, "schema": "ui-registry-contract", "hash": "sha256:stale", "$orqui": {"schema": "x"}}
    env = wrap(stale, ContractSchema.LAYOUT_CONTRACT, "2.0.0")
    assert env["schema"] == "layout-contract"
    assert env["hash"] == digest(LAYOUT)
    assert "$orqui" not in env


def test_wrap_rejects_bad_schema_and_version() -> None:
    with pytest.raises(SchemaMismatch):
        wrap({}, "unknown-schema", "1.0.0")
    with pytest.raises(ValueError):
        wrap({}, "layout-contract", "latest")


def test_wrap_stamps_prerelease_version_verbatim() -> None:
    env = wrap({"a": 1}, "layout-contract", "1.0.0-beta.1")
    assert env["version"] == "1.0.0-beta.1"
    assert unwrap(env).meta.version == "1.0.0-beta.1"


def test_round_trip_is_exact() -> None:
    env = wrap(LAYOUT, "layout-contract", "2.0.0")
    text = json.dumps(env)
    contract = parse_contract(text, verify=True)
    assert contract.document == LAYOUT
    assert contract.schema is ContractSchema.LAYOUT_CONTRACT
    assert contract.meta.version == "2.0.0"
    assert digest(contract.document) == env["hash"]


def test_unwrap_registry() -> None:
    env = wrap({"components": {"Button": {"name": "Button"}}}, "ui-registry-contract", "1.0.0")
    contract = unwrap(env)
    assert contract.schema is ContractSchema.UI_REGISTRY_CONTRACT
    assert contract.document == {"components": {"Button": {"name": "Button"}}}


def test_unwrap_unknown_schema_carries_value() -> None:
    with pytest.raises(SchemaMismatch) as exc_info:
        unwrap({"schema": "unknown-schema", "version": "1.0.0"})
    assert exc_info.value.schema == "unknown-schema"
    assert "unknown-schema" in str(exc_info.value)


def test_unwrap_missing_schema() -> None:
    with pytest.raises(SchemaMismatch) as exc_info:
        unwrap({"tokens": {}})
    assert exc_info.value.schema is None


@pytest.mark.parametrize("value", [None, [], "layout-contract", 3])
def test_unwrap_non_object_is_malformed(value) -> None:
    with pytest.raises(MalformedInput):
        unwrap(value)


def test_parse_contract_invalid_json_is_malformed() -> None:
    with pytest.raises(MalformedInput):
        parse_contract("{not json")


def test_hash_is_advisory_unless_verified() -> None:
    env = wrap(LAYOUT, "layout-contract", "2.0.0")
    env["tokens"] = {}
    assert unwrap(env).document["tokens"] == {}
    with pytest.raises(HashMismatch) as exc_info:
        unwrap(env, verify=True)
    assert exc_info.value.expected == digest(LAYOUT)
    assert exc_info.value.actual == digest({**LAYOUT, "tokens": {}})


def test_unwrap_accepts_legacy_nested_meta() -> None:
    legacy = {
        "$orqui": {"schema": "layout-contract", "version": "1.0.0", "hash": "sha256:old", "generatedAt": "x"},
        **LAYOUT,
    }
    contract = unwrap(legacy)
    assert contract.schema is ContractSchema.LAYOUT_CONTRACT
    assert contract.meta.version == "1.0.0"
    assert contract.document == LAYOUT


def test_validate_structure_clean_layout() -> None:
    assert validate_structure(LAYOUT) == []


def test_validate_structure_layout_warnings() -> None:
    doc = {
        "structure": {
            "regions": {"header": {"padding": {"top": "$tokens.spacing.missing"}}},
            "pages": {"about": {"overrides": {"aside": {}}}, "broken": 3},
        },
        "textStyles": {"body": {"fontFamily": "$tokens.fontFamilies.none"}},
    }
    found = {(w.path, w.message) for w in validate_structure(doc)}
    assert ("tokens", "missing tokens") in found
    assert ("structure.regions.header.padding.top", "unresolved token $tokens.spacing.missing") in found
    assert ("textStyles.body.fontFamily", "unresolved token $tokens.fontFamilies.none") in found
    assert ("structure.pages.about", "page has no label") in found
    assert ("structure.pages.about", "page has no route") in found
    assert ("structure.pages.about.overrides.aside", "override targets an unknown region") in found
    assert ("structure.pages.broken", "page is not an object") in found


def test_validate_structure_accepts_grid_layout_override() -> None:
    doc = {
        **LAYOUT,
        "structure": {
            **LAYOUT["structure"],
            "pages": {"home": {"label": "Home", "route": "/", "overrides": {"gridLayout": {"columns": 12}}}},
        },
    }
    assert validate_structure(doc) == []


def test_validate_structure_missing_regions() -> None:
    paths = [w.path for w in validate_structure({"tokens": {}})]
    assert paths == ["structure.regions"]


def test_validate_structure_registry() -> None:
    assert validate_structure({"components": {"A": {}}}, "ui-registry-contract") == []
    warnings = validate_structure({"components": {"A": 1}}, ContractSchema.UI_REGISTRY_CONTRACT)
    assert [str(w) for w in warnings] == ["components.A: component definition is not an object"]
    assert [w.message for w in validate_structure({}, "ui-registry-contract")] == ["missing components"]


def test_validate_structure_non_object() -> None:
    assert [w.message for w in validate_structure([])] == ["document is not an object"]
