"""Relationship classification by label."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from mc_explorer.core.models.connection import RelationshipTier

# Every known relationship label, reviewed as a whole. Labels not listed here
# classify as UNKNOWN.
RELATIONSHIP_TIERS: Mapping[str, RelationshipTier] = MappingProxyType({
    # Data flow
    "writes_to": RelationshipTier.DIRECT,
    "reads_from": RelationshipTier.DIRECT,
    "imports_to_de": RelationshipTier.DIRECT,
    "updates_de": RelationshipTier.DIRECT,
    "journey_entry_source": RelationshipTier.DIRECT,
    "filters_to": RelationshipTier.DIRECT,
    "filters_from": RelationshipTier.DIRECT,
    # Workflow / execution
    "contains_query": RelationshipTier.INDIRECT,
    "executes_query": RelationshipTier.INDIRECT,
    "triggers_automation": RelationshipTier.INDIRECT,
    "executes_activity": RelationshipTier.INDIRECT,
    "next_step": RelationshipTier.INDIRECT,
    # Configuration
    "filters_de": RelationshipTier.METADATA,
    "uses_in_decision": RelationshipTier.METADATA,
    "provides_data_to": RelationshipTier.METADATA,
})

# Style family the renderer uses for each tier
_RELATION_STYLES: Mapping[RelationshipTier, str] = MappingProxyType({
    RelationshipTier.DIRECT: "direct",
    RelationshipTier.INDIRECT: "workflow",
    RelationshipTier.METADATA: "metadata",
    RelationshipTier.UNKNOWN: "unknown",
})

ACTIVITY_FLOW_TYPES = frozenset({"executes_activity", "next_step"})


def classify(relationship_type: str | None) -> RelationshipTier:
    """Return the tier for a relationship label; unrecognized labels are UNKNOWN."""
    if not relationship_type:
        return RelationshipTier.UNKNOWN
    return RELATIONSHIP_TIERS.get(relationship_type, RelationshipTier.UNKNOWN)


def relation_style(tier: RelationshipTier) -> str:
    return _RELATION_STYLES[tier]


def is_activity_flow(relationship_type: str | None) -> bool:
    """True for edges that sequence automation activities."""
    return relationship_type in ACTIVITY_FLOW_TYPES
