"""Automation step extraction from activity nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from mc_explorer.core.models.asset import AssetNode

_METADATA_TARGET_KEYS = (
    "targetName",
    "targetDE",
    "targetDe",
    "deName",
    "dataExtensionName",
    "destinationName",
)
_NODE_TARGET_KEYS = ("targetName", "toName", "deName", "destinationName")


@dataclass(frozen=True)
class AutomationStep:
    step_number: int
    activity_type: str
    activity_id: str
    name: str
    target_asset: str | None
    automation_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "stepNumber": self.step_number,
            "activityType": self.activity_type,
            "activityId": self.activity_id,
            "name": self.name,
            "targetAsset": self.target_asset,
            "automationId": self.automation_id,
        }


def extract_target_asset(node: AssetNode) -> str | None:
    """Best-effort name of the asset an activity writes to.

    Checks well-known metadata keys, then extra node fields, then the text
    after the last arrow in the label ("Query → Target DE").
    """
    for key in _METADATA_TARGET_KEYS:
        if node.metadata.get(key):
            return node.metadata[key]

    extras = node.extra_fields
    for key in _NODE_TARGET_KEYS:
        if extras.get(key):
            return extras[key]

    if "→" in node.label:
        target = node.label.rsplit("→", 1)[-1].strip()
        return target or None
    return None


def automation_steps(nodes: Iterable[AssetNode], automation_id: str) -> list[AutomationStep]:
    """Ordered steps of an automation, built from its activity nodes."""
    steps = []
    for node in nodes:
        if node.category != "Activity" or node.metadata.get("automationId") != automation_id:
            continue
        steps.append(AutomationStep(
            step_number=_as_int(node.metadata.get("stepNumber")),
            activity_type=node.metadata.get("activityType") or "Unknown",
            activity_id=node.id,
            name=node.label,
            target_asset=extract_target_asset(node),
            automation_id=automation_id,
        ))
    # sorted() is stable, so equal step numbers keep graph order
    return sorted(steps, key=lambda step: step.step_number)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
