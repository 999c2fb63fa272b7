from __future__ import annotations

import html
import re
from typing import Optional

import yaml

from .constants import NODE_ID_PREFIX, UNNAMED_LABEL

_NON_WORD_RE = re.compile(r"\W", re.ASCII)
_LEADING_LETTER_RE = re.compile(r"^[A-Za-z]")


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def node_id(name: str) -> str:
    """Map an action name to a Mermaid-safe node identifier.

    Every character outside [A-Za-z0-9_] becomes an underscore; results that do
    not start with a letter get the `N_` prefix. Distinct names can collide
    (e.g. "a b" and "a-b").
    """
    sanitized = _NON_WORD_RE.sub("_", name)
    if _LEADING_LETTER_RE.match(sanitized):
        return sanitized
    return f"{NODE_ID_PREFIX}{sanitized}"


def sanitize_label(name: str) -> str:
    """Human-readable label for an action or case name."""
    label = re.sub(r"[()]", "", name).replace("_", " ").strip()
    return label or UNNAMED_LABEL


def mm_text(text: str) -> str:
    """Escape text for Mermaid labels."""
    normalized = re.sub(r"\s+", " ", html.unescape(str(text))).strip()
    return (
        normalized.replace("&", "#amp;")
        .replace("<", "#lt;")
        .replace(">", "#gt;")
        .replace('"', "#quot;")
        .replace("|", "#124;")
    )


def mm_header(direction: str, layout: Optional[str], title: Optional[str] = None) -> str:
    """Front matter (rendering engine config) followed by the graph declaration."""
    front: dict[str, object] = {}
    if title:
        front["title"] = title
    if layout:
        front["config"] = {"layout": layout}

    lines: list[str] = []
    if front:
        lines.append("---")
        lines.append(
            yaml.safe_dump(front, sort_keys=False, default_flow_style=False).rstrip("\n")
        )
        lines.append("---")
    lines.append(f"graph {direction}")
    return "\n".join(lines) + "\n"


def mm_node(nid: str, label: str, shape: str) -> str:
    """Node declaration; the label is quoted so brackets in it cannot close the shape."""
    text = f'"{mm_text(label)}"'
    if shape == "diamond":
        return f"{nid}{{{{{text}}}}}"
    if shape == "rectangle":
        return f"{nid}[{text}]"
    if shape == "circle":
        return f"{nid}(({text}))"
    return f"{nid}({text})"


def mm_edge(src: str, dst: str, label: Optional[str] = None) -> str:
    if label:
        return f"{src} -- {mm_text(label)} --> {dst}"
    return f"{src} --> {dst}"


def mm_subgraph_open(title: str) -> str:
    return f'subgraph "{mm_text(title)}"'


def mm_subgraph_close() -> str:
    return "end"


def mm_class_def(class_name: str, fill: str, stroke: str) -> str:
    return f"classDef {class_name} fill:{fill},stroke:{stroke},stroke-width:2px;"


def mm_class_apply(nid: str, class_name: str) -> str:
    return f"class {nid} {class_name};"


def mm_style(nid: str, style: str) -> str:
    return f"style {nid} {style};"
