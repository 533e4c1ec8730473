"""CLI tests against a snapshot file."""

import json

import pytest
from typer.testing import CliRunner

from mc_explorer.app.config import ExplorerConfig, set_config
from mc_explorer.cli import app

runner = CliRunner()

SNAPSHOT = {
    "nodes": [
        {"id": "de_customers", "label": "Customers", "category": "Data Extensions", "type": "DataExtension"},
        {"id": "q_nightly", "label": "Nightly Query", "category": "Queries", "type": "Query"},
        {"id": "auto_nightly", "label": "Nightly", "category": "Automations", "type": "Automation"},
        {"id": "de_unused", "label": "Unused", "category": "Data Extensions", "type": "DataExtension"},
        {"id": "act_2", "label": "Import → Customers", "category": "Activity",
         "activityType": "ImportActivity", "stepNumber": 2, "metadata": {"automationId": "auto_nightly"}},
        {"id": "act_1", "label": "Run Nightly Query", "category": "Activity",
         "activityType": "QueryActivity", "stepNumber": 1, "metadata": {"automationId": "auto_nightly"}},
    ],
    "edges": [
        {"id": "e1", "source": "q_nightly", "target": "de_customers", "type": "writes_to"},
        {"id": "e2", "source": "auto_nightly", "target": "q_nightly", "type": "contains_query"},
        {"id": "e3", "source": "act_1", "target": "act_2", "type": "next_step"},
        {"id": "e_bad", "source": "q_nightly", "target": "missing", "type": "reads_from"},
    ],
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    set_config(ExplorerConfig(data_dir=tmp_path, log_level="ERROR"))


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path


def test_show(snapshot):
    result = runner.invoke(app, ["show", str(snapshot)])

    assert result.exit_code == 0, result.output
    assert "Relationship Stats" in result.output
    assert "Objects: 6 (5 connected, 1 orphan)" in result.output
    assert "3/4 shown, 1 dropped" in result.output


def test_show_focused_selection(snapshot):
    result = runner.invoke(app, ["show", str(snapshot), "--object", "Queries:q_nightly", "--select", "q_nightly"])

    assert result.exit_code == 0, result.output
    assert "Objects: 3 (3 connected, 0 orphan)" in result.output
    assert "de_unused" not in result.output


def test_show_rejects_bad_object(snapshot):
    result = runner.invoke(app, ["show", str(snapshot), "--object", "no-colon"])

    assert result.exit_code == 2


def test_missing_snapshot(tmp_path):
    result = runner.invoke(app, ["show", str(tmp_path / "absent.json")])

    assert result.exit_code == 1
    assert "Snapshot not found" in result.output


def test_expand(snapshot):
    result = runner.invoke(app, ["expand", str(snapshot), "auto_nightly", "--depth", "1"])

    assert result.exit_code == 0, result.output
    assert "Rounds: 1" in result.output
    assert "Unexpanded: q_nightly, auto_nightly" in result.output


def test_steps(snapshot):
    result = runner.invoke(app, ["steps", str(snapshot), "auto_nightly"])

    assert result.exit_code == 0, result.output
    assert result.output.index("Run Nightly Query") < result.output.index("Import → Customers")
    assert "QueryActivity" in result.output


def test_steps_none_found(snapshot):
    result = runner.invoke(app, ["steps", str(snapshot), "q_nightly"])

    assert result.exit_code == 0
    assert "No activity steps found" in result.output
