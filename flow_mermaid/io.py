# flow_mermaid/io.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .convert import parse_flow_json
from .styles import NodeStyle, merge_styles

YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})


def read_flow_text(path: Path) -> str:
    """Read raw input text; `-` reads stdin."""
    if str(path) == "-":
        return sys.stdin.read()
    if not path.exists():
        raise FileNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


def _load_yaml(raw: str, source: Path) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {source}: {e}") from e


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    data = _load_yaml(path.read_text(encoding="utf-8"), path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )
    return data


def load_definition(path: Path) -> Any:
    """Load a flow definition.

    `.yaml`/`.yml` files are read with PyYAML; everything else (including
    stdin) must be JSON.
    """
    text = read_flow_text(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        return _load_yaml(text, path)
    return parse_flow_json(text)


def load_styles(
    path: Path, base: Optional[dict[str, NodeStyle]] = None
) -> dict[str, NodeStyle]:
    """Load a kind -> style override table from YAML.

    Accepts either a bare mapping or one nested under a top-level `styles` key:

      styles:
        Compose: {fill: "#EEEEEE", stroke: "#333333"}
        ApiConnection: {shape: rounded, class_name: Connector}
    """
    if not path.exists():
        raise FileNotFoundError(str(path))

    data = _load_yaml_mapping(path)
    raw = data.get("styles", data)
    if not isinstance(raw, dict):
        raise TypeError(f"`styles` must be a mapping in {path}, got {type(raw).__name__}")
    return merge_styles(base, raw)
