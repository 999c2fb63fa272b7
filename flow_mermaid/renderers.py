from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .constants import START_KIND
from .mermaid_fmt import mm_node, mm_subgraph_close, mm_subgraph_open, node_id, sanitize_label
from .model import Action, ConditionAction, ScopeAction, SimpleAction, SwitchAction

if TYPE_CHECKING:
    from .emitter import Emitter

RenderFn = Callable[["Emitter", str, Any, tuple[str, ...]], list[str]]


def render_simple(
    emitter: Emitter, name: str, action: SimpleAction, path: tuple[str, ...]
) -> list[str]:
    """Single shaped node; nested actions are each wired directly from it."""
    nid = node_id(name)
    style = emitter.style_for(action.kind)

    if action.kind == START_KIND:
        emitter.state.add_line(mm_node(nid, "Start", "circle"))
    else:
        emitter.state.add_line(mm_node(nid, sanitize_label(name), style.shape))
    emitter.apply_class(nid, style)

    if not action.actions:
        return [nid]

    exits = emitter.emit_all(action.actions, path + (name,), entry=nid, connect="every")
    return exits or [nid]


def _open_subgraph(emitter: Emitter, name: str, title: str, shape: str, kind: str) -> str:
    nid = node_id(name)
    emitter.state.add_line(mm_subgraph_open(title))
    emitter.diagnostics.info("I_SUBGRAPH_START", f"Started subgraph: {title}", action=name)
    emitter.state.add_line(mm_node(nid, sanitize_label(name), shape))
    emitter.apply_class(nid, emitter.style_for(kind))
    return nid


def _close_subgraph(emitter: Emitter, name: str, title: str) -> None:
    emitter.state.add_line(mm_subgraph_close())
    emitter.diagnostics.info("I_SUBGRAPH_END", f"Ended subgraph: {title}", action=name)


def render_condition(
    emitter: Emitter, name: str, action: ConditionAction, path: tuple[str, ...]
) -> list[str]:
    title = f"{sanitize_label(name)} [If Condition]"
    nid = _open_subgraph(emitter, name, title, "diamond", action.kind)
    child_path = path + (name,)

    branches = (("Yes", "ifTrue", action.actions), ("No", "ifFalse", action.else_actions))
    exits: list[str] = []
    for label, branch, mapping in branches:
        if mapping:
            exits.extend(
                emitter.emit_all(
                    mapping, child_path, entry=nid, label=label, connect="first",
                    note=f"{label} branch",
                )
            )
        else:
            emitter.diagnostics.warning(
                "W_EMPTY_BRANCH",
                f"No actions found in '{branch}' branch of \"{name}\". "
                "Treating condition node as last node.",
                action=name,
            )
            exits.append(nid)

    _close_subgraph(emitter, name, title)
    return exits


def render_switch(
    emitter: Emitter, name: str, action: SwitchAction, path: tuple[str, ...]
) -> list[str]:
    title = f"{sanitize_label(name)} [Switch Condition]"
    nid = _open_subgraph(emitter, name, title, "diamond", action.kind)
    child_path = path + (name,)

    exits: list[str] = []
    if not action.cases:
        emitter.diagnostics.warning("W_NO_CASES", f'No cases found in "{name}".', action=name)

    for case_name, mapping in action.cases.items():
        if mapping:
            exits.extend(
                emitter.emit_all(
                    mapping, child_path, entry=nid, label=sanitize_label(case_name),
                    connect="first", note=f"Case: {case_name}",
                )
            )
        else:
            emitter.diagnostics.warning(
                "W_EMPTY_BRANCH",
                f'No actions found in case "{case_name}" of "{name}". '
                "Treating condition node as last node.",
                action=name,
            )
            exits.append(nid)

    # Every default action gets its own edge, unlike the cases above.
    if action.default:
        exits.extend(
            emitter.emit_all(
                action.default, child_path, entry=nid, label="Default",
                connect="every", note="Default case",
            )
        )

    _close_subgraph(emitter, name, title)
    return exits


def render_scope(
    emitter: Emitter, name: str, action: ScopeAction, path: tuple[str, ...]
) -> list[str]:
    title = f"{sanitize_label(name)} [{action.kind}]"
    nid = _open_subgraph(emitter, name, title, "rectangle", action.kind)

    if action.actions:
        exits = emitter.emit_all(
            action.actions, path + (name,), entry=nid, connect="first", note="Scope child"
        )
        exits = exits or [nid]
    else:
        emitter.diagnostics.warning(
            "W_EMPTY_SCOPE",
            f'No child actions found in {action.kind} "{name}". Treating its node as last node.',
            action=name,
        )
        exits = [nid]

    _close_subgraph(emitter, name, title)
    return exits


RENDERERS: dict[type, RenderFn] = {
    SimpleAction: render_simple,
    ConditionAction: render_condition,
    SwitchAction: render_switch,
    ScopeAction: render_scope,
}


def renderer_for(action: Action) -> RenderFn:
    return RENDERERS[type(action)]
