"""
Asset Graph Models.

Nodes are marketing-automation assets (data extensions, queries,
automations, journeys, filters, activities); edges are the relationships the
backend reports between them. Payloads arrive either flat or wrapped in a
``{"data": {...}}`` element envelope; both are accepted.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mc_explorer.utils.logging import get_logger

logger = get_logger("models.asset")

# Top-level node fields that belong in metadata
_NODE_METADATA_FIELDS = ("activityType", "stepNumber")


def _unwrap(element: Mapping[str, Any]) -> dict[str, Any]:
    """Return the element body, unwrapping a ``{"data": {...}}`` envelope."""
    data = element.get("data")
    if isinstance(data, Mapping):
        return dict(data)
    return dict(element)


def _as_text(value: Any) -> Any:
    """Display fields tolerate null and scalar values (YAML reads ``label: 2024`` as int)."""
    if value is None:
        return ""
    if isinstance(value, (int, float, bool)):
        return str(value)
    return value


# ============================================================================
# Node
# ============================================================================


class AssetNode(BaseModel):
    """A marketing-automation asset in the explorer graph.

    Attributes:
        id: Globally unique asset id
        label: Display name
        category: Asset family (e.g. "Data Extensions", "Automations", "Activity")
        type: Concrete asset type (e.g. "DataExtension", "Query")
        metadata: Free-form backend data; may carry isRelated, activityType,
            stepNumber, automationId, connectionCount. ``isOrphan`` is only
            ever set by the connectivity indexer.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Unique asset id")
    label: str = Field(default="", description="Display name")
    category: str = Field(default="", description="Asset category")
    type: str = Field(default="", description="Asset type")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Backend and derived annotations",
    )

    @field_validator("label", "category", "type", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    @field_validator("metadata", mode="before")
    @classmethod
    def normalize_metadata(cls, value):
        return {} if value is None else value

    def __str__(self) -> str:
        return f"AssetNode({self.id}: {self.label or self.type})"

    @property
    def is_related(self) -> bool:
        """Node was pulled in as a dependency rather than explicitly selected."""
        return self.metadata.get("isRelated") is True

    @property
    def is_orphan(self) -> bool:
        return self.metadata.get("isOrphan") is True

    @property
    def is_activity(self) -> bool:
        return self.category == "Activity" or self.metadata.get("isActivity") is True

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Backend fields outside the declared schema."""
        return dict(self.model_extra or {})

    def with_metadata(self, **updates: Any) -> "AssetNode":
        """Return a copy with ``updates`` layered over the metadata."""
        return self.model_copy(update={"metadata": {**self.metadata, **updates}})

    def to_element(self) -> dict[str, Any]:
        """Convert to a renderer element dict."""
        return {"data": self.model_dump(mode="json")}

    @classmethod
    def from_raw(cls, element: Mapping[str, Any]) -> "AssetNode":
        """Create a node from a raw backend element.

        Raises:
            ValueError: If the element carries no id
        """
        data = _unwrap(element)
        if not data.get("id"):
            raise ValueError("node element has no id")

        metadata = dict(data.get("metadata") or {})
        for key in _NODE_METADATA_FIELDS:
            if key in data and key not in metadata:
                metadata[key] = data[key]
        data["metadata"] = metadata
        data["id"] = str(data["id"])
        return cls.model_validate(data)


# ============================================================================
# Edge
# ============================================================================


class AssetEdge(BaseModel):
    """A directed relationship between two assets (source -> target)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(description="Unique edge id")
    source: str = Field(description="Source node id")
    target: str = Field(description="Target node id")
    type: str = Field(default="", description="Relationship label, e.g. writes_to")
    label: str = Field(default="", description="Human-readable edge label")
    step_number: Optional[int] = Field(
        default=None,
        alias="stepNumber",
        description="Automation step for activity flow edges",
    )

    @field_validator("type", "label", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    def __str__(self) -> str:
        return f"AssetEdge({self.source} --[{self.type}]--> {self.target})"

    def to_element(self) -> dict[str, Any]:
        return {"data": self.model_dump(mode="json", by_alias=True)}

    @classmethod
    def from_raw(cls, element: Mapping[str, Any]) -> "AssetEdge":
        """Create an edge from a raw backend element.

        Raises:
            ValueError: If the element carries no id
        """
        data = _unwrap(element)
        if not data.get("id"):
            raise ValueError("edge element has no id")
        for key in ("id", "source", "target"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return cls.model_validate(data)


# ============================================================================
# Graph payload
# ============================================================================


class GraphPayload(BaseModel):
    """A collection of nodes and edges, as fetched or accumulated."""

    nodes: list[AssetNode] = Field(default_factory=list)
    edges: list[AssetEdge] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes) + len(self.edges)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def edge_ids(self) -> list[str]:
        return [edge.id for edge in self.edges]

    def get_node(self, node_id: str) -> AssetNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.model_dump(mode="json") for n in self.nodes],
            "edges": [e.model_dump(mode="json", by_alias=True) for e in self.edges],
        }

    @classmethod
    def empty(cls) -> "GraphPayload":
        return cls()

    @classmethod
    def from_raw(cls, raw: "GraphPayload | Mapping[str, Any] | None") -> "GraphPayload":
        """Normalize a raw ``{nodes, edges}`` mapping into a payload.

        Elements without an id are skipped and logged.
        """
        if raw is None:
            return cls()
        if isinstance(raw, GraphPayload):
            return raw
        return cls(
            nodes=_parse_elements(raw.get("nodes") or [], AssetNode),
            edges=_parse_elements(raw.get("edges") or [], AssetEdge),
        )


def _parse_elements(elements: Iterable[Any], model: type) -> list:
    parsed = []
    for element in elements:
        if isinstance(element, model):
            parsed.append(element)
            continue
        if not isinstance(element, Mapping):
            logger.warning(f"Skipping non-mapping {model.__name__} element: {element!r}")
            continue
        try:
            parsed.append(model.from_raw(element))
        except ValueError as e:
            logger.warning(f"Skipping malformed {model.__name__} element: {e}")
    return parsed
