from __future__ import annotations

from dataclasses import dataclass

from .diagnostics import DiagnosticLog
from .model import Action, ActionMap, children_of


@dataclass(frozen=True)
class IndexEntry:
    action: Action
    # Ancestor action names, outermost first.
    path: tuple[str, ...]
    # The mapping that declares the action.
    container: ActionMap


def build_action_index(actions: ActionMap, diagnostics: DiagnosticLog) -> dict[str, IndexEntry]:
    """Index every action by name, regardless of nesting depth.

    Dependencies are resolved against this index, so a `runAfter` reference can
    point into any other scope. Names are global: a repeated name is reported
    and the later declaration wins.
    """
    index: dict[str, IndexEntry] = {}

    def walk(mapping: ActionMap, path: tuple[str, ...]) -> None:
        for name, action in mapping.items():
            if name in index:
                prev = "/".join(index[name].path + (name,))
                diagnostics.warning(
                    "W_DUPLICATE_ACTION_NAME",
                    f'Action name "{name}" is declared more than once '
                    f"(previously at {prev}); the later declaration wins.",
                    action=name,
                )
            index[name] = IndexEntry(action=action, path=path, container=mapping)
            for _, child_actions in children_of(action):
                walk(child_actions, path + (name,))

    walk(actions, ())
    return index
