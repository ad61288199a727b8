import polars as pl

from orqui.io.catalog import TOKEN_FRAME_SCHEMA, token_frame


def test_token_frame_rows_sorted_with_css_values() -> None:
    tokens = {
        "spacing": {"md": {"value": 16, "unit": "px"}, "lg": {"value": 24, "unit": "px"}},
        "fontFamilies": {"primary": {"family": "Inter", "fallbacks": ["sans-serif"]}},
        "colors": {"accent": {"value": "#3366ff"}},
        "fontWeights": {"bold": {"value": 700}},
    }
    df = token_frame(tokens)

    assert df.columns == list(TOKEN_FRAME_SCHEMA)
    assert df.height == 5
    assert df["category"].to_list() == ["colors", "fontFamilies", "fontWeights", "spacing", "spacing"]
    assert df.filter(pl.col("key") == "lg")["ref"].item() == "$tokens.spacing.lg"
    assert df.filter(pl.col("key") == "primary")["css"].item() == "'Inter', sans-serif"
    assert df["kind"].to_list() == ["raw", "font-family", "unitless", "sized", "sized"]


def test_token_frame_keeps_malformed_rows_with_nulls() -> None:
    df = token_frame({"spacing": {"bad": {"oops": 1}}, "colors": "not-a-table"})
    assert df.height == 1
    assert df.row(0) == ("spacing", "bad", "$tokens.spacing.bad", None, None)


def test_token_frame_empty_has_schema() -> None:
    for tokens in (None, {}):
        df = token_frame(tokens)
        assert df.height == 0
        assert dict(df.schema) == TOKEN_FRAME_SCHEMA
