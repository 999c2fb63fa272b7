# flow_mermaid/constants.py
from __future__ import annotations

# Synthetic entry node connected to every dependency-free top-level action.
START_ID = "Start"
START_STYLE = "fill:#C8E6C9,stroke:#00C853,stroke-width:2px"

# Mermaid node IDs must start with a letter.
NODE_ID_PREFIX = "N_"
UNNAMED_LABEL = "Unnamed Action"

LAYOUT_DEFAULT = "elk"
DIRECTION_DEFAULT = "TD"
DIRECTIONS: tuple[str, ...] = ("TD", "TB", "BT", "LR", "RL")

# Kind tags selecting the compound renderers.
CONDITION_KINDS: frozenset[str] = frozenset({"If"})
SWITCH_KINDS: frozenset[str] = frozenset({"Switch"})
SCOPE_KINDS: frozenset[str] = frozenset({"Foreach", "Until", "Scope"})
START_KIND = "Start"

# Class definitions always emitted at the end of the diagram so the legend is
# stable across inputs (order is significant).
LEGEND_CLASSES: tuple[str, ...] = (
    "If",
    "Switch",
    "Foreach",
    "Until",
    "SetVariable",
    "Scope",
    "Terminate",
    "InitializeVariable",
    "OpenApiConnection",
    "Expression",
    "Workflow",
)

# Export shape tried when the document has no top-level `actions` key.
ACTIONS_FALLBACK_PATH: tuple[str, ...] = ("body", "properties", "definition", "actions")
