from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .action_index import build_action_index
from .constants import (
    ACTIONS_FALLBACK_PATH,
    DIRECTION_DEFAULT,
    LAYOUT_DEFAULT,
    LEGEND_CLASSES,
    START_ID,
    START_STYLE,
)
from .diagnostics import DiagnosticLog
from .emitter import DiagramState, Emitter
from .errors import ActionsNotFoundError, FlowParseError
from .mermaid_fmt import mm_class_def, mm_header, mm_node, mm_style, node_id
from .model import parse_actions
from .styles import NodeStyle, class_style


@dataclass(frozen=True)
class RenderConfig:
    direction: str = DIRECTION_DEFAULT
    # None omits the front matter config block.
    layout: Optional[str] = LAYOUT_DEFAULT
    title: Optional[str] = None
    styles: Optional[Mapping[str, NodeStyle]] = None
    legend: bool = True


@dataclass(frozen=True)
class ConversionResult:
    code: str
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)


def parse_flow_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FlowParseError(f"Invalid JSON format provided: {e}") from e


def extract_actions(definition: Any) -> Mapping[str, Any]:
    """Locate the actions object in a flow definition.

    Tries `actions` first, then `body.properties.definition.actions`; any
    other shape is rejected.
    """
    if isinstance(definition, Mapping):
        actions = definition.get("actions")
        if isinstance(actions, Mapping):
            return actions

        node: Any = definition
        for key in ACTIONS_FALLBACK_PATH:
            node = node.get(key) if isinstance(node, Mapping) else None
        if isinstance(node, Mapping):
            return node

    raise ActionsNotFoundError("Invalid structure. Actions not found.")


def convert_definition(
    definition: Any,
    cfg: Optional[RenderConfig] = None,
    diagnostics: Optional[DiagnosticLog] = None,
) -> ConversionResult:
    """Compile a parsed flow definition into Mermaid flowchart text."""
    cfg = cfg or RenderConfig()
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    raw_actions = extract_actions(definition)
    actions = parse_actions(raw_actions, diagnostics)
    index = build_action_index(actions, diagnostics)

    state = DiagramState()
    emitter = Emitter(index, state, diagnostics, styles=cfg.styles)

    state.add_line(mm_node(START_ID, "Start", "circle"))
    state.add_line(mm_style(START_ID, START_STYLE))

    starting = [name for name, action in actions.items() if not action.run_after]
    if not starting:
        diagnostics.warning(
            "W_NO_START_ACTIONS", "No starting actions found to connect to Start node."
        )
    for name in starting:
        emitter.connect(START_ID, node_id(name))

    for name in actions:
        emitter.emit(name, actions, ())

    if cfg.legend:
        for class_name in LEGEND_CLASSES:
            if class_name in state.defined_classes:
                continue
            style = class_style(class_name, cfg.styles)
            state.add_line(mm_class_def(class_name, style.fill, style.stroke))
            state.defined_classes.add(class_name)

    code = mm_header(cfg.direction, cfg.layout, cfg.title) + state.render()
    return ConversionResult(code=code, diagnostics=diagnostics)


def flow_to_mermaid(
    text: str,
    cfg: Optional[RenderConfig] = None,
    diagnostics: Optional[DiagnosticLog] = None,
) -> str:
    """Convert flow definition JSON text into Mermaid flowchart text."""
    return convert_definition(parse_flow_json(text), cfg, diagnostics).code
