"""Tests for `orqui.core.cascade` base + page override merging."""

import copy

import pytest

from orqui.core.cascade import (
    UNSET,
    PageOverrides,
    Patch,
    Set,
    effective_document,
    effective_region,
    page_overrides,
    resolve_page_layout,
)

BASE = {
    "regions": {
        "sidebar": {
            "enabled": True,
            "position": "left",
            "behavior": {"fixed": True, "collapsible": False, "scrollable": True},
            "dimensions": {"width": "$tokens.sizing.sidebar-width", "minWidth": "200px"},
            "padding": {"top": "$tokens.spacing.md", "left": "$tokens.spacing.sm"},
        },
        "header": {"enabled": True, "position": "top", "dimensions": {"height": "56px"}},
        "main": {"enabled": True},
        "footer": {"enabled": False},
    },
    "headerElements": {
        "search": {"enabled": True, "placeholder": "Search"},
        "cta": {"enabled": False},
        "icons": {"enabled": True, "items": [{"id": "bell"}]},
    },
    "contentLayout": {"maxWidth": "1200px", "grid": {"enabled": False, "columns": 12}},
}


def test_sibling_inner_fields_survive() -> None:
    sidebar = BASE["regions"]["sidebar"]
    out = effective_region(sidebar, {"behavior": {"collapsible": True}})
    assert out["behavior"] == {"fixed": True, "collapsible": True, "scrollable": True}
    assert out["position"] == "left"


def test_nested_dimensions_and_padding_merge_key_by_key() -> None:
    sidebar = BASE["regions"]["sidebar"]
    out = effective_region(sidebar, {"dimensions": {"width": "300px"}, "padding": {"left": "0"}})
    assert out["dimensions"] == {"width": "300px", "minWidth": "200px"}
    assert out["padding"] == {"top": "$tokens.spacing.md", "left": "0"}


def test_other_fields_replace_wholesale() -> None:
    base = {"navigation": {"items": [1, 2], "style": "list"}}
    out = effective_region(base, {"navigation": {"items": [3]}})
    assert out == {"navigation": {"items": [3]}}


@pytest.mark.parametrize("falsy", [False, 0, "", None, [], {}])
def test_present_falsy_value_overrides(falsy) -> None:
    out = effective_region({"enabled": True, "label": "x"}, {"enabled": falsy})
    assert out["enabled"] == falsy
    assert out["label"] == "x"


def test_absent_region_is_not_synthesized() -> None:
    assert effective_region(None, None) is None
    assert effective_region(None, {}) is None
    assert effective_region(None, {"enabled": True}) == {"enabled": True}


def test_effective_document_identity_for_empty_overrides() -> None:
    assert effective_document(BASE, {}) == BASE
    assert effective_document(BASE, None) == BASE
    assert effective_document({}, {}) == {}


def test_effective_document_does_not_mutate_inputs() -> None:
    base = copy.deepcopy(BASE)
    overrides = {"sidebar": {"behavior": {"fixed": False}}, "headerElements": {"search": {"enabled": False}}}
    snapshot = copy.deepcopy(overrides)
    effective_document(base, overrides)
    assert base == BASE
    assert overrides == snapshot


def test_effective_document_regions_and_header_elements() -> None:
    overrides = {
        "footer": {"enabled": True},
        "sidebar": {"behavior": {"collapsible": True}},
        "headerElements": {"search": {"enabled": False}, "cta": {"enabled": True, "label": "New"}},
    }
    out = effective_document(BASE, overrides)
    assert out["regions"]["footer"] == {"enabled": True}
    assert out["regions"]["sidebar"]["behavior"]["collapsible"] is True
    assert out["regions"]["header"] == BASE["regions"]["header"]
    assert out["headerElements"]["search"] == {"enabled": False, "placeholder": "Search"}
    assert out["headerElements"]["cta"] == {"enabled": True, "label": "New"}
    assert out["headerElements"]["icons"] == BASE["headerElements"]["icons"]
    assert list(out["regions"]) == ["sidebar", "header", "main", "footer"]


def test_effective_document_content_layout_grid_merges() -> None:
    out = effective_document(BASE, {"contentLayout": {"grid": {"enabled": True}}})
    assert out["contentLayout"] == {"maxWidth": "1200px", "grid": {"enabled": True, "columns": 12}}


def test_grid_layout_override_replaces_wholesale() -> None:
    base = {**BASE, "gridLayout": {"columns": 12, "rowHeight": 40, "items": [{"id": "a"}]}}
    out = effective_document(base, {"gridLayout": {"columns": 6}})
    assert out["gridLayout"] == {"columns": 6}
    assert base["gridLayout"]["rowHeight"] == 40
    assert effective_document(base, {"sidebar": {"enabled": False}})["gridLayout"] == base["gridLayout"]


def test_grid_layout_override_without_base_section() -> None:
    po = PageOverrides.from_mapping({"gridLayout": {"columns": 4}})
    assert po.grid_layout == Set({"columns": 4})
    assert not po.is_empty()
    assert PageOverrides.from_mapping({}).grid_layout is UNSET
    assert effective_document(BASE, po)["gridLayout"] == {"columns": 4}


def test_override_only_region_is_added() -> None:
    base = {"regions": {"main": {"enabled": True}}}
    out = effective_document(base, {"footer": {"enabled": True}})
    assert out["regions"] == {"main": {"enabled": True}, "footer": {"enabled": True}}


def test_reapplying_override_is_idempotent() -> None:
    overrides = {"sidebar": {"behavior": {"collapsible": True}, "position": "right"}, "footer": {"enabled": True}}
    once = effective_document(BASE, overrides)
    twice = effective_document(once, overrides)
    assert twice == once


def test_patch_unset_and_set_are_distinct() -> None:
    patch = Patch.from_mapping({"enabled": False})
    assert patch.get("enabled") == Set(False)
    assert patch.get("position") is UNSET
    assert not UNSET
    assert repr(UNSET) == "UNSET"
    assert Patch.from_mapping({"behavior": {"a": 1}}, {"behavior"}).to_mapping() == {"behavior": {"a": 1}}


def test_page_overrides_typed_view() -> None:
    po = PageOverrides.from_mapping({"sidebar": {"enabled": False}, "unknown": {"x": 1}})
    assert set(po.regions) == {"sidebar"}
    assert not po.is_empty()
    assert PageOverrides.from_mapping({}).is_empty()
    assert PageOverrides.from_mapping("nope").is_empty()


def test_resolve_page_layout_applies_page_overrides() -> None:
    layout = {
        "tokens": {},
        "structure": {
            **BASE,
            "pages": {"settings": {"label": "Settings", "route": "/settings", "overrides": {"footer": {"enabled": True}}}},
        },
    }
    out = resolve_page_layout(layout, "settings")
    assert out["structure"]["regions"]["footer"] == {"enabled": True}
    assert out["tokens"] == {}
    assert layout["structure"]["regions"]["footer"] == {"enabled": False}
    assert page_overrides(layout, "settings") is not None


@pytest.mark.parametrize("page_id", ["missing", None])
def test_unknown_page_resolves_to_base(page_id) -> None:
    layout = {"structure": {**BASE, "pages": {}}}
    assert resolve_page_layout(layout, page_id) == layout
    assert page_overrides(layout, "missing") is None


def test_resolve_page_layout_tolerates_non_mapping() -> None:
    assert resolve_page_layout(None, "home") == {}
