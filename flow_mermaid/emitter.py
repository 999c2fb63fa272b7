from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional

from .action_index import IndexEntry
from .diagnostics import DiagnosticLog
from .mermaid_fmt import mm_class_apply, mm_class_def, mm_edge, node_id
from .model import ActionMap
from .renderers import renderer_for
from .styles import NodeStyle, style_for


class VisitState(Enum):
    IN_PROGRESS = "in_progress"
    DONE = "done"


def unique_nodes(nodes: Iterable[str]) -> list[str]:
    """Drop repeated node ids, keeping first-seen order."""
    return list(dict.fromkeys(nodes))


@dataclass
class DiagramState:
    """Accumulator for one conversion; owned by the driver and passed to every render call."""

    lines: list[str] = field(default_factory=list)
    # Exact rendered edge text, so `A --> B` and `A -- Yes --> B` are distinct.
    edges: set[str] = field(default_factory=set)
    defined_classes: set[str] = field(default_factory=set)
    visits: dict[str, VisitState] = field(default_factory=dict)
    exit_nodes: dict[str, list[str]] = field(default_factory=dict)

    def add_line(self, line: str) -> None:
        self.lines.append(line)

    def add_edge(self, src: str, dst: str, label: Optional[str] = None) -> bool:
        edge = mm_edge(src, dst, label)
        if edge in self.edges:
            return False
        self.edges.add(edge)
        self.lines.append(edge)
        return True

    def define_class(self, style: NodeStyle) -> bool:
        if style.class_name in self.defined_classes:
            return False
        self.defined_classes.add(style.class_name)
        self.lines.append(mm_class_def(style.class_name, style.fill, style.stroke))
        return True

    def render(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""


class Emitter:
    """Memoized depth-first walk over the action tree.

    Dependencies are force-emitted ahead of their dependents; siblings follow
    the declaration order of the mapping being iterated. Each action is
    rendered at most once.
    """

    def __init__(
        self,
        index: Mapping[str, IndexEntry],
        state: DiagramState,
        diagnostics: DiagnosticLog,
        styles: Optional[Mapping[str, NodeStyle]] = None,
    ) -> None:
        self.index = index
        self.state = state
        self.diagnostics = diagnostics
        self.styles = styles

    def style_for(self, kind: str) -> NodeStyle:
        return style_for(kind, self.styles)

    def apply_class(self, nid: str, style: NodeStyle) -> None:
        self.state.add_line(mm_class_apply(nid, style.class_name))
        if self.state.define_class(style):
            self.diagnostics.info("I_CLASS_DEFINED", f"Defined class {style.class_name}")

    def connect(self, src: str, dst: str, label: Optional[str] = None, note: str = "") -> None:
        if self.state.add_edge(src, dst, label):
            suffix = f" ({note})" if note else ""
            self.diagnostics.info("I_CONNECTED", f"Connected {src} to {dst}{suffix}")

    def emit(self, name: str, container: ActionMap, path: tuple[str, ...] = ()) -> list[str]:
        """Render `name` (and, first, its dependencies); return its exit nodes."""
        action = container.get(name)
        if action is None:
            self.diagnostics.warning(
                "W_ACTION_NOT_FOUND", f'Action "{name}" not found in actions map.', action=name
            )
            return []

        nid = node_id(name)
        if name in self.state.visits:
            return list(self.state.exit_nodes.get(name) or [nid])

        # Marked before recursing so a dependency cycle terminates.
        self.state.visits[name] = VisitState.IN_PROGRESS

        for dep_name in action.run_after:
            self._connect_dependency(name, nid, dep_name)

        render = renderer_for(action)
        exits = unique_nodes(render(self, name, action, path))

        self.state.exit_nodes[name] = exits
        self.state.visits[name] = VisitState.DONE
        self.diagnostics.info(
            "I_EXIT_NODES", f'Action "{name}" has last nodes: {", ".join(exits)}', action=name
        )
        return exits

    def emit_all(
        self,
        mapping: ActionMap,
        path: tuple[str, ...],
        *,
        entry: Optional[str] = None,
        label: Optional[str] = None,
        connect: str = "none",
        note: str = "",
    ) -> list[str]:
        """Emit every action of `mapping`, optionally wiring `entry` to it first.

        connect="first" draws an edge to the first declared child only,
        connect="every" draws one edge per child, connect="none" draws none.
        Returns the concatenated exit nodes of all children.
        """
        exits: list[str] = []
        for i, child_name in enumerate(mapping):
            if entry is not None and (connect == "every" or (connect == "first" and i == 0)):
                self.connect(entry, node_id(child_name), label, note)
            exits.extend(self.emit(child_name, mapping, path))
        return unique_nodes(exits)

    def _connect_dependency(self, name: str, nid: str, dep_name: str) -> None:
        entry = self.index.get(dep_name)
        if entry is None:
            self.diagnostics.warning(
                "W_DEPENDENCY_NOT_FOUND",
                f'Dependency "{dep_name}" of action "{name}" not found in global actions map.',
                action=name,
            )
            return

        visit = self.state.visits.get(dep_name)
        if visit is None:
            self.emit(dep_name, entry.container, entry.path)
        elif visit is VisitState.IN_PROGRESS:
            self.diagnostics.warning(
                "W_DEPENDENCY_CYCLE",
                f'Dependency cycle: action "{name}" runs after "{dep_name}", which is '
                "still being rendered; connecting from its node only.",
                action=name,
            )

        for src in self.state.exit_nodes.get(dep_name) or [node_id(dep_name)]:
            self.connect(src, nid)
