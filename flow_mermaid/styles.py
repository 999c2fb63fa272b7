from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

SHAPES: tuple[str, ...] = ("diamond", "rectangle", "rounded")


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    stroke: str
    shape: str
    class_name: str


def _style(fill: str, stroke: str, shape: str, class_name: str) -> NodeStyle:
    return NodeStyle(fill=fill, stroke=stroke, shape=shape, class_name=class_name)


STYLE_TABLE: dict[str, NodeStyle] = {
    "If": _style("#FFE0B2", "#FF6D00", "diamond", "If"),
    "Switch": _style("#BBDEFB", "#2962FF", "diamond", "Switch"),
    "Foreach": _style("#C8E6C9", "#00C853", "rectangle", "Foreach"),
    "Until": _style("#C8E6C9", "#00C853", "rectangle", "Until"),
    "SetVariable": _style("#FFF9C4", "#FFEB3B", "rectangle", "SetVariable"),
    "Scope": _style("#BBDEFB", "#2962FF", "rectangle", "Scope"),
    "Terminate": _style("#FFCDD2", "#C62828", "rectangle", "Terminate"),
    "RunScript": _style("#B3E5FC", "#0277BD", "rectangle", "RunScript"),
    "SendEmail": _style("#FFECB3", "#FFA000", "rectangle", "SendEmail"),
    "Compose": _style("#FFFFFF", "#000000", "rectangle", "Compose"),
    "Response": _style("#FFFFFF", "#000000", "rectangle", "Response"),
    "InitializeVariable": _style("#FFFFFF", "#000000", "rectangle", "InitializeVariable"),
    # Rendered with the SetVariable class.
    "AppendToStringVariable": _style("#FFF9C4", "#FFEB3B", "rectangle", "SetVariable"),
    "OpenApiConnection": _style("#FFFFFF", "#000000", "rectangle", "OpenApiConnection"),
    "Http": _style("#FFFFFF", "#000000", "rectangle", "Http"),
    "Expression": _style("#E1BEE7", "#8E24AA", "rectangle", "Expression"),
    "Workflow": _style("#FFCCBC", "#E64A19", "rectangle", "Workflow"),
}

DEFAULT_STYLE = _style("#FFFFFF", "#000000", "rectangle", "Default")


def style_for(kind: str, overrides: Optional[Mapping[str, NodeStyle]] = None) -> NodeStyle:
    """Resolve the visual descriptor for an action kind.

    Overrides take precedence over the built-in table; unknown kinds fall back
    to `DEFAULT_STYLE`.
    """
    if overrides and kind in overrides:
        return overrides[kind]
    return STYLE_TABLE.get(kind, DEFAULT_STYLE)


def class_style(class_name: str, overrides: Optional[Mapping[str, NodeStyle]] = None) -> NodeStyle:
    """Find the style that defines `class_name` (used for the legend block)."""
    for table in (overrides or {}, STYLE_TABLE):
        for style in table.values():
            if style.class_name == class_name:
                return style
    return replace(DEFAULT_STYLE, class_name=class_name)


def merge_styles(
    base: Optional[Mapping[str, NodeStyle]], raw: Mapping[str, Any]
) -> dict[str, NodeStyle]:
    """Build an override table from a kind -> {fill, stroke, shape, class_name} mapping.

    Missing fields inherit from the existing style for that kind (override table
    first, then the built-in table, then the default).
    """
    merged: dict[str, NodeStyle] = dict(base or {})
    for kind, spec in raw.items():
        if not isinstance(kind, str) or not kind:
            raise ValueError(f"style kind must be a non-empty string, got {kind!r}")
        if not isinstance(spec, Mapping):
            raise ValueError(
                f"style for {kind!r} must be a mapping, got {type(spec).__name__}"
            )

        unknown = set(spec) - {"fill", "stroke", "shape", "class_name"}
        if unknown:
            raise ValueError(f"style for {kind!r} has unknown keys: {sorted(unknown)}")

        current = style_for(kind, merged)
        if current is DEFAULT_STYLE:
            current = replace(DEFAULT_STYLE, class_name=kind)

        updates: dict[str, str] = {}
        for key, value in spec.items():
            # An unquoted `#RRGGBB` in YAML parses as a comment, leaving null.
            if value is None or isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise ValueError(
                    f"style for {kind!r} field {key!r} must be a string, got {value!r} "
                    "(quote colours such as '#EEEEEE' in YAML)"
                )
            if not str(value).strip():
                raise ValueError(f"style for {kind!r} field {key!r} must not be empty")
            updates[key] = str(value)
        shape = updates.get("shape", current.shape)
        if shape not in SHAPES:
            raise ValueError(
                f"style for {kind!r} has unsupported shape {shape!r} "
                f"(expected one of {', '.join(SHAPES)})"
            )
        merged[kind] = replace(current, **updates)
    return merged
