"""Focus-centered pedigree chart.

The focus person sits at the chart center with their partners beside them,
parents and grandparents above, and children below. Positions come from a
fixed grid, so the same graph always gives the same chart:

- partner rows grow outward from the focus, alternating right and left;
- ancestor rows are built from columns measured bottom-up, so a couple is
  always centered inside the space reserved for its child;
- children blocks are packed left to right under their union marker.

Within a generation no two boxes (padded by half a gutter each side) ever
overlap.
"""
from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..config import CONFIG, LayoutMetrics
from ..models import FamilyGraph, Person, Union
from ..relationships import get_parent_union, get_spouse_id, get_unions_for_person
from .models import (
    LayoutNode,
    LayoutResult,
    NodeKind,
    PedigreeOptions,
    child_edge,
    person_data,
    spouse_edge,
    union_data,
)

logger = structlog.get_logger(__name__)


@dataclass
class _Column:
    """Horizontal space reserved for one person and their ancestors."""
    person_id: str
    union: Union | None = None
    left: _Column | None = None
    right: _Column | None = None
    # Partners of `union` that were already placed elsewhere in the chart
    placed_partner_ids: tuple[str, ...] = ()
    width: float = 0.0


class _PedigreeBuilder:
    def __init__(
        self,
        graph: FamilyGraph,
        focus: Person,
        options: PedigreeOptions,
        metrics: LayoutMetrics,
    ):
        self.graph = graph
        self.focus = focus
        self.options = options
        self.m = metrics
        self.result = LayoutResult()
        self.placed: set[str] = set()
        self.placed_unions: set[str] = set()
        self.cx, self.cy = options.center

    def row_y(self, generation: int) -> float:
        return self.cy + generation * self.m.generation_step

    def add_person(self, person: Person, x: float, generation: int, is_focus: bool = False) -> LayoutNode:
        node = LayoutNode(
            id=person.id,
            kind=NodeKind.PERSON,
            x=x,
            y=self.row_y(generation),
            width=self.m.node_width,
            height=self.m.node_height,
            generation=generation,
            is_focus=is_focus,
            data=person_data(person, is_focus=is_focus),
        )
        self.placed.add(person.id)
        self.result.nodes.append(node)
        return node

    def add_marker(self, union: Union, x: float, generation: int) -> LayoutNode:
        self.placed_unions.add(union.id)
        node = LayoutNode(
            id=union.id,
            kind=NodeKind.UNION,
            x=x,
            y=self.row_y(generation),
            width=self.m.union_width,
            height=self.m.union_height,
            generation=generation,
            data=union_data(union),
        )
        self.result.nodes.append(node)
        return node

    def link_partner(self, person_id: str, marker: LayoutNode) -> None:
        person_node = self.result.node(person_id)
        if person_node is None:
            return
        self.result.edges.append(
            spouse_edge(person_id, marker.id, person_on_left=person_node.x < marker.x)
        )

    def showable_children(self, union: Union) -> list[str]:
        if not self.options.show_children:
            return []
        return [c for c in dict.fromkeys(union.child_ids) if self.graph.has_person(c)]

    # Generation 0: focus and partners

    def place_partner_row(self) -> list[tuple[LayoutNode, list[str]]]:
        """Place the focus, their partners and union markers.

        Returns (marker, child ids) for every focus union that got a marker.
        """
        m = self.m
        self.add_person(self.focus, self.cx, 0, is_focus=True)

        # Padded outer edge of the row on each side
        edges = {
            1: self.cx + m.node_width / 2 + m.h_spacing / 2,
            -1: self.cx - m.node_width / 2 - m.h_spacing / 2,
        }

        def take(side: int, width: float) -> float:
            center = edges[side] + side * (width + m.h_spacing) / 2
            edges[side] += side * (width + m.h_spacing)
            return center

        markers: list[tuple[LayoutNode, list[str]]] = []
        for index, union in enumerate(get_unions_for_person(self.graph, self.focus.id)):
            side = 1 if index % 2 == 0 else -1
            spouse_id = get_spouse_id(union, self.focus.id)
            spouse = self.graph.get_person(spouse_id)
            new_spouse = spouse if spouse is not None and spouse.id not in self.placed else None
            children = self.showable_children(union)

            if spouse is None and not children:
                continue

            marker = self.add_marker(union, take(side, m.union_width), 0)
            if new_spouse is not None:
                self.add_person(new_spouse, take(side, m.node_width), 0)

            self.link_partner(self.focus.id, marker)
            if spouse is not None:
                self.link_partner(spouse.id, marker)
            markers.append((marker, children))

        return markers

    # Ancestors

    def build_column(self, person_id: str, depth: int) -> _Column:
        column = _Column(person_id=person_id)
        union = get_parent_union(self.graph, person_id) if depth > 0 else None
        if union is not None and union.id not in self.placed_unions:
            known = [pid for pid in union.partner_ids if self.graph.has_person(pid)]
            new = [pid for pid in known if pid not in self.placed]
            self.placed.update(new)
            if known:
                self.placed_unions.add(union.id)
                column.union = union
                column.placed_partner_ids = tuple(pid for pid in known if pid not in new)
                if union.partner1_id in new:
                    column.left = self.build_column(union.partner1_id, depth - 1)
                if union.partner2_id in new:
                    column.right = self.build_column(union.partner2_id, depth - 1)

        column.width = self.m.slot_width
        if column.union is not None:
            span = self.m.marker_slot_width
            span += column.left.width if column.left else 0.0
            span += column.right.width if column.right else 0.0
            column.width = max(column.width, span)
        return column

    def place_ancestors(self, column: _Column, x: float, generation: int) -> None:
        """Place the parents of `column`'s person in the row above `x`."""
        if column.union is None:
            return
        m = self.m
        left_w = column.left.width if column.left else 0.0
        right_w = column.right.width if column.right else 0.0
        start = x - (left_w + m.marker_slot_width + right_w) / 2
        parent_gen = generation - 1

        marker = self.add_marker(column.union, start + left_w + m.marker_slot_width / 2, parent_gen)
        for side, center in (
            (column.left, start + left_w / 2),
            (column.right, start + left_w + m.marker_slot_width + right_w / 2),
        ):
            if side is None:
                continue
            person = self.graph.get_person(side.person_id)
            self.add_person(person, center, parent_gen)
            self.link_partner(person.id, marker)
            self.place_ancestors(side, center, parent_gen)

        for partner_id in column.placed_partner_ids:
            self.link_partner(partner_id, marker)
        self.result.edges.append(child_edge(column.union.id, column.person_id))

    # Generation +1: children

    def place_children(self, markers: list[tuple[LayoutNode, list[str]]]) -> None:
        m = self.m
        cursor = float("-inf")
        for marker, child_ids in sorted(markers, key=lambda item: item[0].x):
            new = [c for c in child_ids if c not in self.placed]
            if new:
                width = len(new) * m.slot_width
                start = max(marker.x - width / 2, cursor)
                for k, child_id in enumerate(new):
                    self.add_person(
                        self.graph.get_person(child_id),
                        start + m.slot_width / 2 + k * m.slot_width,
                        1,
                    )
                cursor = start + width
            for child_id in child_ids:
                self.result.edges.append(child_edge(marker.id, child_id))

    def build(self) -> LayoutResult:
        markers = self.place_partner_row()
        depth = 2 if self.options.show_grandparents else 1
        root = self.build_column(self.focus.id, depth)
        self.place_ancestors(root, self.cx, 0)
        self.place_children(markers)
        return self.result


def compute_pedigree_layout(
    graph: FamilyGraph,
    focus_person_id: str,
    options: PedigreeOptions | None = None,
    metrics: LayoutMetrics | None = None,
) -> LayoutResult:
    """Lay out the pedigree chart around one person.

    Args:
        graph: Graph to draw
        focus_person_id: Person at the chart center
        options: Which generations to show and where the center is
        metrics: Box sizes and spacing (defaults to the configured pedigree metrics)

    Returns:
        Positioned nodes and edges; empty if the focus person is unknown
    """
    focus = graph.get_person(focus_person_id)
    if focus is None:
        logger.debug("pedigree_unknown_focus", person_id=focus_person_id)
        return LayoutResult()

    builder = _PedigreeBuilder(
        graph,
        focus,
        options or PedigreeOptions(),
        metrics or CONFIG.pedigree,
    )
    result = builder.build()
    logger.debug(
        "pedigree_layout",
        person_id=focus_person_id,
        nodes=len(result.nodes),
        edges=len(result.edges),
    )
    return result
