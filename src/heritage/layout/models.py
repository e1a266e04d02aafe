"""Layout options and result types shared by the chart engines.

Node coordinates are box centers. `LayoutResult.to_dict()` converts them to
the top-left ``position`` expected by node-graph renderers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..dates import format_lifespan
from ..models import Person, Union


class NodeKind(str, Enum):
    PERSON = "person"
    UNION = "union"


class EdgeKind(str, Enum):
    SPOUSE = "spouse"  # partner -> union marker
    CHILD = "child"  # union marker -> child


class PedigreeOptions(BaseModel):
    """Options for the focus-centered pedigree chart."""

    show_grandparents: bool = True
    show_children: bool = True
    center: tuple[float, float] = (400.0, 300.0)


class DescendantOptions(BaseModel):
    """Options for the top-down descendants chart."""

    start: tuple[float, float] = (500.0, 100.0)
    max_depth: int = Field(10, ge=0)


@dataclass
class LayoutNode:
    """A positioned person or union marker."""
    id: str
    kind: NodeKind
    x: float
    y: float
    width: float
    height: float
    generation: int = 0  # 0=focus, negative=ancestors, positive=descendants
    is_focus: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the renderer node shape."""
        return {
            "id": self.id,
            "type": self.kind.value,
            "position": {"x": self.left, "y": self.y - self.height / 2},
            "width": self.width,
            "height": self.height,
            "data": self.data,
        }


@dataclass
class LayoutEdge:
    """A spouse or child connector."""
    id: str
    kind: EdgeKind
    source: str
    target: str
    source_handle: str
    target_handle: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
        }


@dataclass
class LayoutResult:
    """Nodes and edges of one chart."""
    nodes: list[LayoutNode] = field(default_factory=list)
    edges: list[LayoutEdge] = field(default_factory=list)

    def node(self, node_id: str) -> LayoutNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_node(self, node_id: str) -> bool:
        return self.node(node_id) is not None

    def edge(self, edge_id: str) -> LayoutEdge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def nodes_in_generation(self, generation: int) -> list[LayoutNode]:
        return [n for n in self.nodes if n.generation == generation]

    @property
    def person_ids(self) -> list[str]:
        return [n.id for n in self.nodes if n.kind is NodeKind.PERSON]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


# Node data and edge builders used by both engines


def person_data(person: Person, is_focus: bool = False) -> dict[str, Any]:
    data = person.to_json_dict()
    data.update(
        name=person.display_name,
        dates=format_lifespan(person.birth_date, person.death_date),
        isFocus=is_focus,
    )
    return data


def union_data(union: Union) -> dict[str, Any]:
    data = union.to_json_dict()
    data.update(
        unionType=union.type.value,
        spouse1Id=union.partner1_id,
        spouse2Id=union.partner2_id,
        marriageDate=data["startDate"],
        marriagePlace=union.start_place,
    )
    return data


def spouse_edge(person_id: str, union_id: str, person_on_left: bool) -> LayoutEdge:
    """Edge from a partner into the side of a union marker."""
    return LayoutEdge(
        id=f"spouse-{person_id}-{union_id}",
        kind=EdgeKind.SPOUSE,
        source=person_id,
        target=union_id,
        source_handle="spouse-right" if person_on_left else "spouse-left",
        target_handle="left" if person_on_left else "right",
    )


def child_edge(union_id: str, child_id: str) -> LayoutEdge:
    return LayoutEdge(
        id=f"child-{union_id}-{child_id}",
        kind=EdgeKind.CHILD,
        source=union_id,
        target=child_id,
        source_handle="bottom",
        target_handle="top",
    )
