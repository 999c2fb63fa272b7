from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional, Union

from .constants import CONDITION_KINDS, SCOPE_KINDS, SWITCH_KINDS
from .diagnostics import DiagnosticLog


@dataclass(frozen=True)
class SimpleAction:
    """Leaf action; may still carry nested `actions` (rendered as plain children)."""

    kind: str
    run_after: tuple[str, ...] = ()
    actions: dict[str, "Action"] = field(default_factory=dict)


@dataclass(frozen=True)
class ConditionAction:
    """`If`: `actions` is the true branch, `else_actions` the false branch."""

    kind: str
    run_after: tuple[str, ...] = ()
    actions: dict[str, "Action"] = field(default_factory=dict)
    else_actions: dict[str, "Action"] = field(default_factory=dict)


@dataclass(frozen=True)
class SwitchAction:
    kind: str
    run_after: tuple[str, ...] = ()
    cases: dict[str, dict[str, "Action"]] = field(default_factory=dict)
    default: Optional[dict[str, "Action"]] = None


@dataclass(frozen=True)
class ScopeAction:
    """Bounded container: Foreach, Until and Scope."""

    kind: str
    run_after: tuple[str, ...] = ()
    actions: dict[str, "Action"] = field(default_factory=dict)


Action = Union[SimpleAction, ConditionAction, SwitchAction, ScopeAction]
ActionMap = dict[str, Action]


def _warn_malformed(diagnostics: DiagnosticLog, name: str, message: str) -> None:
    diagnostics.warning("W_MALFORMED_ACTION", f'Action "{name}": {message}', action=name)


def _run_after(name: str, raw: Mapping[str, Any], diagnostics: DiagnosticLog) -> tuple[str, ...]:
    value = raw.get("runAfter")
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple(str(k) for k in value.keys())
    _warn_malformed(diagnostics, name, "runAfter is not an object; ignoring it")
    return ()


def _nested_actions(
    name: str,
    container: Any,
    where: str,
    diagnostics: DiagnosticLog,
    path: tuple[str, ...],
) -> Optional[ActionMap]:
    """Parse `container["actions"]`; None when the container or its actions are absent."""
    if container is None:
        return None
    if not isinstance(container, Mapping):
        _warn_malformed(diagnostics, name, f"{where} is not an object; ignoring it")
        return None
    raw_actions = container.get("actions")
    if raw_actions is None:
        return None
    if not isinstance(raw_actions, Mapping):
        _warn_malformed(diagnostics, name, f"{where}.actions is not an object; ignoring it")
        return None
    return parse_actions(raw_actions, diagnostics, path + (name,))


def parse_action(
    name: str,
    raw: Any,
    diagnostics: DiagnosticLog,
    path: tuple[str, ...] = (),
) -> Optional[Action]:
    """Convert one raw action object into its typed variant."""
    if not isinstance(raw, Mapping):
        _warn_malformed(
            diagnostics, name, f"expected an object, got {type(raw).__name__}; skipping"
        )
        return None

    kind = raw.get("type")
    if not isinstance(kind, str):
        kind = ""
    run_after = _run_after(name, raw, diagnostics)
    actions = _nested_actions(name, raw, "action", diagnostics, path) or {}

    if kind in CONDITION_KINDS:
        else_actions = _nested_actions(name, raw.get("else"), "else", diagnostics, path)
        return ConditionAction(
            kind=kind, run_after=run_after, actions=actions, else_actions=else_actions or {}
        )

    if kind in SWITCH_KINDS:
        cases: dict[str, ActionMap] = {}
        raw_cases = raw.get("cases")
        if raw_cases is not None and not isinstance(raw_cases, Mapping):
            _warn_malformed(diagnostics, name, "cases is not an object; ignoring it")
            raw_cases = None
        for case_name, case_branch in (raw_cases or {}).items():
            case_actions = _nested_actions(
                name, case_branch, f"case {case_name!r}", diagnostics, path
            )
            cases[str(case_name)] = case_actions or {}
        default = _nested_actions(name, raw.get("default"), "default", diagnostics, path)
        return SwitchAction(kind=kind, run_after=run_after, cases=cases, default=default)

    if kind in SCOPE_KINDS:
        return ScopeAction(kind=kind, run_after=run_after, actions=actions)

    return SimpleAction(kind=kind, run_after=run_after, actions=actions)


def parse_actions(
    raw: Mapping[str, Any],
    diagnostics: DiagnosticLog,
    path: tuple[str, ...] = (),
) -> ActionMap:
    """Parse an actions object, preserving declaration order."""
    out: ActionMap = {}
    for name, raw_action in raw.items():
        action = parse_action(str(name), raw_action, diagnostics, path)
        if action is not None:
            out[str(name)] = action
    return out


def children_of(action: Action) -> Iterator[tuple[str, ActionMap]]:
    """Yield (branch role, child mapping) for every containment path of an action."""
    if isinstance(action, ConditionAction):
        yield "actions", action.actions
        yield "else", action.else_actions
    elif isinstance(action, SwitchAction):
        for case_name, case_actions in action.cases.items():
            yield f"case:{case_name}", case_actions
        if action.default is not None:
            yield "default", action.default
    else:
        yield "actions", action.actions
