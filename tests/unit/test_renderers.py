from flow_mermaid.action_index import build_action_index
from flow_mermaid.diagnostics import DiagnosticLog
from flow_mermaid.emitter import DiagramState, Emitter, VisitState
from flow_mermaid.model import parse_actions


def make_emitter(raw: dict) -> tuple[Emitter, dict]:
    diagnostics = DiagnosticLog()
    actions = parse_actions(raw, diagnostics)
    index = build_action_index(actions, diagnostics)
    return Emitter(index, DiagramState(), diagnostics), actions


def edges(emitter: Emitter) -> list[str]:
    return [line for line in emitter.state.lines if "-->" in line]


def test_condition_with_empty_false_branch_exits_through_true_branch_and_itself():
    emitter, actions = make_emitter(
        {
            "Check": {
                "type": "If",
                "actions": {
                    "T1": {"type": "Compose"},
                    "T2": {"type": "Compose", "runAfter": {"T1": []}},
                },
            }
        }
    )
    exits = emitter.emit("Check", actions)

    assert exits == ["T1", "T2", "Check"]
    assert emitter.state.exit_nodes["Check"] == exits
    assert "Check -- Yes --> T1" in edges(emitter)
    assert "Check -- Yes --> T2" not in edges(emitter)
    assert "W_EMPTY_BRANCH" in emitter.diagnostics.codes()


def test_condition_renders_inside_a_subgraph():
    emitter, actions = make_emitter(
        {
            "Is_big": {
                "type": "If",
                "actions": {"Big": {"type": "Compose"}},
                "else": {"actions": {"Small": {"type": "Compose"}}},
            }
        }
    )
    exits = emitter.emit("Is_big", actions)
    lines = emitter.state.lines

    assert exits == ["Big", "Small"]
    assert lines[0] == 'subgraph "Is big [If Condition]"'
    assert lines[1] == 'Is_big{{"Is big"}}'
    assert lines[-1] == "end"
    assert "Is_big -- No --> Small" in lines
    assert emitter.diagnostics.warnings == []


def test_switch_connects_first_action_per_case_and_every_default_action():
    emitter, actions = make_emitter(
        {
            "Route": {
                "type": "Switch",
                "cases": {
                    "Case_A": {
                        "actions": {
                            "A1": {"type": "Compose"},
                            "A2": {"type": "Compose", "runAfter": {"A1": []}},
                        }
                    },
                    "Empty_case": {"actions": {}},
                },
                "default": {
                    "actions": {
                        "D1": {"type": "Compose"},
                        "D2": {"type": "Compose"},
                        "D3": {"type": "Compose"},
                    }
                },
            }
        }
    )
    exits = emitter.emit("Route", actions)
    rendered = edges(emitter)

    assert "Route -- Case A --> A1" in rendered
    assert not any(e.startswith("Route ") and e.endswith(" A2") for e in rendered)
    assert [e for e in rendered if " -- Default --> " in e] == [
        "Route -- Default --> D1",
        "Route -- Default --> D2",
        "Route -- Default --> D3",
    ]
    assert exits == ["A1", "A2", "Route", "D1", "D2", "D3"]
    assert emitter.state.lines[0] == 'subgraph "Route [Switch Condition]"'
    assert "W_EMPTY_BRANCH" in emitter.diagnostics.codes()


def test_switch_without_cases_or_default_has_no_exit_nodes():
    emitter, actions = make_emitter({"Route": {"type": "Switch"}})
    assert emitter.emit("Route", actions) == []
    assert "W_NO_CASES" in emitter.diagnostics.codes()


def test_scope_connects_first_child_only():
    emitter, actions = make_emitter(
        {
            "Each_row": {
                "type": "Foreach",
                "actions": {
                    "C1": {"type": "Compose"},
                    "C2": {"type": "Compose", "runAfter": {"C1": []}},
                    "C3": {"type": "Compose"},
                },
            }
        }
    )
    exits = emitter.emit("Each_row", actions)
    rendered = edges(emitter)

    assert emitter.state.lines[0] == 'subgraph "Each row [Foreach]"'
    assert emitter.state.lines[1] == 'Each_row["Each row"]'
    assert "Each_row --> C1" in rendered
    assert "Each_row --> C2" not in rendered
    assert "Each_row --> C3" not in rendered
    assert "C1 --> C2" in rendered
    assert exits == ["C1", "C2", "C3"]


def test_empty_scope_is_its_own_exit():
    emitter, actions = make_emitter({"Wait": {"type": "Until"}})
    assert emitter.emit("Wait", actions) == ["Wait"]
    assert "W_EMPTY_SCOPE" in emitter.diagnostics.codes()


def test_simple_action_connects_every_child():
    emitter, actions = make_emitter(
        {
            "Parent": {
                "type": "Compose",
                "actions": {"K1": {"type": "Compose"}, "K2": {"type": "Compose"}},
            }
        }
    )
    exits = emitter.emit("Parent", actions)

    assert {"Parent --> K1", "Parent --> K2"} <= set(edges(emitter))
    assert exits == ["K1", "K2"]
    assert not any(line.startswith("subgraph") for line in emitter.state.lines)


def test_simple_leaf_exit_is_itself():
    emitter, actions = make_emitter({"Leaf": {"type": "Http"}})
    assert emitter.emit("Leaf", actions) == ["Leaf"]
    assert emitter.state.visits["Leaf"] is VisitState.DONE


def test_repeat_emit_returns_cached_exits_without_rerendering():
    emitter, actions = make_emitter(
        {"Box": {"type": "Scope", "actions": {"Inside": {"type": "Compose"}}}}
    )
    first = emitter.emit("Box", actions)
    line_count = len(emitter.state.lines)

    assert emitter.emit("Box", actions) == first == ["Inside"]
    assert len(emitter.state.lines) == line_count


def test_missing_action_yields_no_node():
    emitter, actions = make_emitter({"Real": {"type": "Compose"}})
    assert emitter.emit("Phantom", actions) == []
    assert emitter.state.lines == []
    assert emitter.diagnostics.codes() == ["W_ACTION_NOT_FOUND"]


def test_dependency_wires_every_exit_node_of_a_compound_action():
    emitter, actions = make_emitter(
        {
            "Gate": {
                "type": "If",
                "actions": {"Go": {"type": "Compose"}},
                "else": {"actions": {"Stop": {"type": "Terminate"}}},
            },
            "Next": {"type": "Compose", "runAfter": {"Gate": []}},
        }
    )
    emitter.emit("Next", actions)
    rendered = edges(emitter)

    assert "Go --> Next" in rendered
    assert "Stop --> Next" in rendered
    assert "Gate --> Next" not in rendered


def test_labeled_and_unlabeled_edges_dedup_independently():
    state = DiagramState()
    assert state.add_edge("A", "B")
    assert not state.add_edge("A", "B")
    assert state.add_edge("A", "B", "Yes")
    assert not state.add_edge("A", "B", "Yes")
    assert state.lines == ["A --> B", "A -- Yes --> B"]
