"""Tests for `orqui.core.tokens` reference resolution and CSS helpers."""

import pytest

from orqui.core.tokens import (
    build_root_block,
    css_var,
    css_variables,
    resolve_composite,
    resolve_scalar,
    resolve_text_styles,
    token_to_css,
)

TABLE = {
    "spacing": {"md": {"value": 16, "unit": "px"}, "lg": {"value": 1.5, "unit": "rem"}},
    "sizing": {"sidebar-width": {"value": 260.0, "unit": "px"}},
    "fontFamilies": {
        "primary": {"family": "Inter", "fallbacks": ["sans-serif"]},
        "mono": {"family": "JetBrains Mono", "fallbacks": []},
    },
    "fontWeights": {"bold": {"value": 700}},
    "lineHeights": {"tight": {"value": 1.2}},
    "colors": {"accent": {"value": "#3366ff"}},
}


def test_resolve_scalar_sized_token() -> None:
    assert resolve_scalar("$tokens.spacing.md", TABLE) == "16px"
    assert resolve_scalar("$tokens.spacing.lg", TABLE) == "1.5rem"
    # integral floats render without a trailing ".0"
    assert resolve_scalar("$tokens.sizing.sidebar-width", TABLE) == "260px"


def test_resolve_scalar_unitless_and_raw_tokens() -> None:
    assert resolve_scalar("$tokens.fontWeights.bold", TABLE) == 700
    assert resolve_scalar("$tokens.lineHeights.tight", TABLE) == 1.2
    assert resolve_scalar("$tokens.colors.accent", TABLE) == "#3366ff"


def test_resolve_scalar_font_family_is_not_scalar() -> None:
    assert resolve_scalar("$tokens.fontFamilies.primary", TABLE) is None


@pytest.mark.parametrize(
    "ref",
    ["$tokens.", "not-a-token", "", "$tokens.spacing.xl", "$tokens.missing.md", None, 16],
)
def test_resolve_scalar_is_total(ref) -> None:
    assert resolve_scalar(ref, TABLE) is None


@pytest.mark.parametrize("table", [None, {}, [], {"spacing": "oops"}, {"spacing": {"md": {"oops": 1}}}])
def test_resolve_scalar_tolerates_malformed_tables(table) -> None:
    assert resolve_scalar("$tokens.spacing.md", table) is None


def test_resolve_composite_font_stack_and_literals() -> None:
    style = {
        "fontFamily": "$tokens.fontFamilies.primary",
        "fontSize": "$tokens.spacing.md",
        "fontWeight": "$tokens.fontWeights.bold",
        "textTransform": "uppercase",
        "letterSpacing": None,
    }
    assert resolve_composite(style, TABLE) == {
        "fontFamily": "'Inter', sans-serif",
        "fontSize": "16px",
        "fontWeight": 700,
        "textTransform": "uppercase",
        "letterSpacing": None,
    }


def test_resolve_composite_default_fallback_and_missing_fields() -> None:
    style = {"fontFamily": "$tokens.fontFamilies.mono", "fontSize": "$tokens.fontSizes.huge"}
    out = resolve_composite(style, TABLE)
    assert out == {"fontFamily": "'JetBrains Mono', sans-serif"}


def test_resolve_composite_keeps_null_literal_but_drops_unresolved_ref() -> None:
    style = {"lineHeight": None, "fontSize": "$tokens.fontSizes.huge", "fontStyle": ""}
    out = resolve_composite(style, TABLE)
    assert out == {"lineHeight": None, "fontStyle": ""}
    assert "fontSize" not in out


@pytest.mark.parametrize("style", [None, "bold", 3])
def test_resolve_composite_non_mapping_is_empty(style) -> None:
    assert resolve_composite(style, TABLE) == {}


def test_resolve_text_styles_uses_layout_tokens() -> None:
    layout = {"tokens": TABLE, "textStyles": {"heading": {"fontFamily": "$tokens.fontFamilies.primary"}}}
    assert resolve_text_styles(layout) == {"heading": {"fontFamily": "'Inter', sans-serif"}}
    assert resolve_text_styles({"tokens": TABLE}) == {}


def test_css_helpers() -> None:
    assert css_var("spacing", "md") == "var(--orqui-spacing-md)"
    assert token_to_css({"value": 16, "unit": "px"}) == "16px"
    assert token_to_css({"value": 700}) == "700"
    assert token_to_css({"oops": True}) is None

    variables = css_variables({"spacing": TABLE["spacing"], "fontFamilies": {"primary": TABLE["fontFamilies"]["primary"]}})
    assert variables == {
        "--orqui-spacing-md": "16px",
        "--orqui-spacing-lg": "1.5rem",
        "--orqui-fontFamilies-primary": "'Inter', sans-serif",
    }


def test_build_root_block() -> None:
    block = build_root_block({"spacing": {"md": {"value": 16, "unit": "px"}}})
    assert block == ":root {\n  --orqui-spacing-md: 16px;\n}"
    assert build_root_block(None) == ":root {\n}"
