"""Top-down descendants chart.

The root person is drawn at the top. Each person's unions hang to the right
as ``[marker][spouse]`` pairs, and each union's children are drawn one
generation lower, left to right. Subtrees are measured bottom-up first, so
sibling subtrees never share horizontal space.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from ..config import CONFIG, LayoutMetrics
from ..models import FamilyGraph, Person, Union
from ..relationships import get_spouse_id, get_unions_for_person
from .models import (
    DescendantOptions,
    EdgeKind,
    LayoutEdge,
    LayoutNode,
    LayoutResult,
    NodeKind,
    child_edge,
    person_data,
    spouse_edge,
    union_data,
)

logger = structlog.get_logger(__name__)


@dataclass
class UnionBranch:
    """One union of a person, with the part of the tree below it."""
    union: Union
    spouse: Person | None = None
    # Spouse already drawn elsewhere in the chart; linked but not drawn again
    linked_spouse_id: str | None = None
    children: list[DescendantTree] = field(default_factory=list)
    # Children already drawn under an earlier union, one generation down
    linked_child_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            self.spouse is None
            and self.linked_spouse_id is None
            and not self.children
            and not self.linked_child_ids
        )


@dataclass
class _Slot:
    """Offsets of one union's marker, spouse and children block from the person center."""
    branch: UnionBranch
    marker_dx: float
    below: bool = False
    spouse_dx: float | None = None
    block_dx: float | None = None


@dataclass
class DescendantTree:
    person: Person
    unions: list[UnionBranch] = field(default_factory=list)
    depth: int = 0

    # Filled in by measure_tree(); offsets relative to the person center
    slots: list[_Slot] = field(default_factory=list)
    left: float = 0.0
    right: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left


def build_descendant_tree(
    graph: FamilyGraph,
    person: Person,
    max_depth: int,
    visited: dict[str, int] | None = None,
    depth: int = 0,
    seen_unions: set[str] | None = None,
) -> DescendantTree:
    """Collect a person's unions, spouses and children depth-first.

    Every person and union appears at most once; `visited` maps each drawn
    person to their depth. Children beyond `max_depth` generations are
    dropped.
    """
    if visited is None:
        visited = {person.id: depth}
    if seen_unions is None:
        seen_unions = set()
    tree = DescendantTree(person=person, depth=depth)

    for union in get_unions_for_person(graph, person.id):
        if union.id in seen_unions:
            continue
        seen_unions.add(union.id)
        branch = UnionBranch(union=union)
        spouse_id = get_spouse_id(union, person.id)
        if graph.has_person(spouse_id):
            if spouse_id in visited:
                branch.linked_spouse_id = spouse_id
            else:
                visited[spouse_id] = depth
                branch.spouse = graph.get_person(spouse_id)

        if depth < max_depth:
            for child_id in dict.fromkeys(union.child_ids):
                child = graph.get_person(child_id)
                if child is None:
                    continue
                if child_id in visited:
                    if visited[child_id] == depth + 1:
                        branch.linked_child_ids.append(child_id)
                    continue
                visited[child_id] = depth + 1
                branch.children.append(
                    build_descendant_tree(graph, child, max_depth, visited, depth + 1, seen_unions)
                )

        if not branch.is_empty:
            tree.unions.append(branch)

    return tree


def measure_tree(tree: DescendantTree, m: LayoutMetrics) -> DescendantTree:
    """Compute slot offsets and the horizontal extent of every subtree."""
    for branch in tree.unions:
        for child in branch.children:
            measure_tree(child, m)

    gap = m.h_spacing
    left, right = -m.node_width / 2, m.node_width / 2
    # Right edge of the last box on the person's row
    chain_end = m.node_width / 2
    block_end = float("-inf")
    has_below_marker = False
    tree.slots = []

    for branch in tree.unions:
        if branch.spouse is None and branch.children and not has_below_marker:
            slot = _Slot(branch, marker_dx=0.0, below=True)
            has_below_marker = True
        else:
            slot = _Slot(branch, marker_dx=chain_end + gap + m.union_width / 2)
            chain_end = slot.marker_dx + m.union_width / 2
            if branch.spouse is not None:
                slot.spouse_dx = chain_end + gap + m.node_width / 2
                chain_end = slot.spouse_dx + m.node_width / 2
            right = max(right, chain_end)

        if branch.children:
            block_w = sum(c.width for c in branch.children) + gap * (len(branch.children) - 1)
            slot.block_dx = max(slot.marker_dx - block_w / 2, block_end + gap)
            block_end = slot.block_dx + block_w
            left = min(left, slot.block_dx)
            right = max(right, block_end)

        tree.slots.append(slot)

    tree.left, tree.right = left, right
    return tree


class _DescendantPlacer:
    def __init__(self, metrics: LayoutMetrics):
        self.m = metrics
        self.result = LayoutResult()
        self.linked: list[tuple[str, str]] = []
        self.linked_children: list[tuple[str, str]] = []

    def place(self, tree: DescendantTree, x: float, y: float, generation: int) -> None:
        m = self.m
        is_root = generation == 0
        self.result.nodes.append(LayoutNode(
            id=tree.person.id,
            kind=NodeKind.PERSON,
            x=x,
            y=y,
            width=m.node_width,
            height=m.node_height,
            generation=generation,
            is_focus=is_root,
            data=person_data(tree.person, is_focus=is_root),
        ))

        for slot in tree.slots:
            union = slot.branch.union
            marker_x = x + slot.marker_dx
            marker_y = y + (m.node_height + m.v_spacing) / 2 if slot.below else y
            self.result.nodes.append(LayoutNode(
                id=union.id,
                kind=NodeKind.UNION,
                x=marker_x,
                y=marker_y,
                width=m.union_width,
                height=m.union_height,
                generation=generation,
                data=union_data(union),
            ))

            if slot.below:
                self.result.edges.append(LayoutEdge(
                    id=f"spouse-{tree.person.id}-{union.id}",
                    kind=EdgeKind.SPOUSE,
                    source=tree.person.id,
                    target=union.id,
                    source_handle="bottom",
                    target_handle="top",
                ))
            else:
                self.result.edges.append(spouse_edge(tree.person.id, union.id, person_on_left=True))

            spouse = slot.branch.spouse
            if spouse is not None:
                self.result.nodes.append(LayoutNode(
                    id=spouse.id,
                    kind=NodeKind.PERSON,
                    x=x + slot.spouse_dx,
                    y=y,
                    width=m.node_width,
                    height=m.node_height,
                    generation=generation,
                    data=person_data(spouse),
                ))
                self.result.edges.append(spouse_edge(spouse.id, union.id, person_on_left=False))
            elif slot.branch.linked_spouse_id:
                self.linked.append((slot.branch.linked_spouse_id, union.id))
            self.linked_children.extend((union.id, c) for c in slot.branch.linked_child_ids)

            if slot.block_dx is None:
                continue
            cursor = x + slot.block_dx
            for child in slot.branch.children:
                self.place(child, cursor - child.left, y + m.generation_step, generation + 1)
                self.result.edges.append(child_edge(union.id, child.person.id))
                cursor += child.width + m.h_spacing

    def link_known_relatives(self) -> None:
        for person_id, union_id in self.linked:
            person_node = self.result.node(person_id)
            marker = self.result.node(union_id)
            if person_node is None or marker is None:
                continue
            self.result.edges.append(
                spouse_edge(person_id, union_id, person_on_left=person_node.x < marker.x)
            )
        for union_id, child_id in self.linked_children:
            if self.result.has_node(union_id) and self.result.has_node(child_id):
                self.result.edges.append(child_edge(union_id, child_id))


def compute_descendants_layout(
    graph: FamilyGraph,
    focus_person_id: str,
    options: DescendantOptions | None = None,
    metrics: LayoutMetrics | None = None,
) -> LayoutResult:
    """Lay out the descendants chart of one person.

    Args:
        graph: Graph to draw
        focus_person_id: Root of the chart
        options: Start position and depth limit
        metrics: Box sizes and spacing (defaults to the configured descendants metrics)

    Returns:
        Positioned nodes and edges; empty if the person is unknown
    """
    root = graph.get_person(focus_person_id)
    if root is None:
        logger.debug("descendants_unknown_focus", person_id=focus_person_id)
        return LayoutResult()

    options = options or DescendantOptions(max_depth=CONFIG.max_depth)
    m = metrics or CONFIG.descendants

    tree = measure_tree(build_descendant_tree(graph, root, options.max_depth), m)
    placer = _DescendantPlacer(m)
    start_x, start_y = options.start
    placer.place(tree, start_x, start_y, 0)
    placer.link_known_relatives()

    logger.debug(
        "descendants_layout",
        person_id=focus_person_id,
        width=tree.width,
        nodes=len(placer.result.nodes),
    )
    return placer.result
