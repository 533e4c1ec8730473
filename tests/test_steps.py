"""Automation step extraction tests."""

from graph_fixtures import node

from mc_explorer.core.models.asset import AssetNode
from mc_explorer.domain.graph.steps import automation_steps, extract_target_asset


def _activity(node_id, step, automation_id="auto1", **fields):
    return node(node_id, category="Activity", type="Activity", automationId=automation_id, stepNumber=step, **fields)


def test_target_from_metadata_first():
    activity = AssetNode.from_raw({
        "id": "act1",
        "label": "Query → Label Target",
        "toName": "Extra Target",
        "metadata": {"targetDE": "Metadata Target"},
    })

    assert extract_target_asset(activity) == "Metadata Target"


def test_target_from_extra_fields():
    activity = AssetNode.from_raw({"id": "act1", "label": "Query → Label Target", "toName": "Extra Target"})

    assert extract_target_asset(activity) == "Extra Target"


def test_target_from_label_arrow():
    activity = AssetNode(id="act1", label="Import → Staging → Customers")

    assert extract_target_asset(activity) == "Customers"


def test_no_target():
    assert extract_target_asset(AssetNode(id="act1", label="Wait")) is None
    assert extract_target_asset(AssetNode(id="act2", label="Broken →  ")) is None


def test_steps_sorted_and_filtered():
    nodes = [
        _activity("third", 3),
        _activity("first", 1, activityType="QueryActivity"),
        _activity("elsewhere", 2, automation_id="auto2"),
        node("auto1", category="Automations", type="Automation"),
        _activity("second", "2"),
    ]

    found = automation_steps(nodes, "auto1")

    assert [s.activity_id for s in found] == ["first", "second", "third"]
    assert [s.step_number for s in found] == [1, 2, 3]
    assert found[0].to_dict()["activityType"] == "QueryActivity"


def test_invalid_step_numbers_sort_first_and_keep_order():
    nodes = [_activity("b", None), _activity("a", 1), _activity("c", "n/a")]

    found = automation_steps(nodes, "auto1")

    assert [s.activity_id for s in found] == ["b", "c", "a"]
    assert found[0].step_number == 0
