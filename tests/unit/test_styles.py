import pytest
import yaml

from flow_mermaid.styles import DEFAULT_STYLE, NodeStyle, class_style, merge_styles, style_for


def test_known_kinds_resolve_to_table_entries():
    assert style_for("If") == NodeStyle("#FFE0B2", "#FF6D00", "diamond", "If")
    assert style_for("Switch").shape == "diamond"
    assert style_for("Foreach").shape == "rectangle"
    assert style_for("AppendToStringVariable").class_name == "SetVariable"


def test_unknown_kind_falls_back_to_default():
    style = style_for("ApiConnectionWebhook")
    assert style is DEFAULT_STYLE
    assert (style.fill, style.stroke, style.shape, style.class_name) == (
        "#FFFFFF",
        "#000000",
        "rectangle",
        "Default",
    )


def test_overrides_take_precedence():
    overrides = merge_styles(None, {"Compose": {"fill": "#EEEEEE", "shape": "rounded"}})
    style = style_for("Compose", overrides)
    assert style.fill == "#EEEEEE"
    assert style.shape == "rounded"
    # untouched fields are inherited from the built-in table
    assert style.stroke == "#000000"
    assert style.class_name == "Compose"


def test_override_for_unknown_kind_gets_its_own_class():
    overrides = merge_styles(None, {"ApiConnection": {"fill": "#DDDDDD"}})
    assert style_for("ApiConnection", overrides).class_name == "ApiConnection"


@pytest.mark.parametrize(
    "raw",
    [
        {"Compose": "red"},
        {"Compose": {"shape": "hexagon"}},
        {"Compose": {"colour": "#000000"}},
        {"": {"fill": "#000000"}},
    ],
)
def test_merge_styles_rejects_invalid_entries(raw):
    with pytest.raises(ValueError):
        merge_styles(None, raw)


def test_class_style_prefers_overrides():
    overrides = {"Cond": NodeStyle("#000001", "#000002", "diamond", "If")}
    assert class_style("If", overrides).fill == "#000001"
    assert class_style("If").fill == "#FFE0B2"
    assert class_style("Nope").class_name == "Nope"


@pytest.mark.parametrize("value", [None, True, ["#EEEEEE"], {"hex": "#EEEEEE"}, "  "])
def test_merge_styles_rejects_null_and_non_scalar_values(value):
    with pytest.raises(ValueError):
        merge_styles(None, {"Compose": {"fill": value}})


def test_merge_styles_reports_unquoted_yaml_colour():
    raw = yaml.safe_load("Compose:\n  fill: #EEEEEE\n")
    assert raw == {"Compose": {"fill": None}}
    with pytest.raises(ValueError, match="quote colours"):
        merge_styles(None, raw)
