"""Relationship queries over a family graph.

Parents, children, siblings, spouses, ancestors and descendants are all
derived from unions. Every walk keeps a visited set, so malformed cyclic
data (A is B's child and B is A's child) still terminates. Dangling ids give
empty results rather than errors, since the graph may be mid-edit.
"""
from __future__ import annotations

from collections import deque

import structlog

from .models import FamilyGraph, Gender, Person, Union

logger = structlog.get_logger(__name__)


def get_unions_for_person(graph: FamilyGraph, person_id: str) -> list[Union]:
    """Unions in which the person is a partner, in store order."""
    if not person_id:
        return []
    return [u for u in graph.unions if u.has_partner(person_id)]


def get_spouse_id(union: Union, person_id: str) -> str | None:
    """The other partner of a union, or None if unset or not a partner."""
    if union.partner1_id == person_id:
        return union.partner2_id
    if union.partner2_id == person_id:
        return union.partner1_id
    return None


def get_spouse_ids(graph: FamilyGraph, person_id: str) -> list[str]:
    spouses: list[str] = []
    for union in get_unions_for_person(graph, person_id):
        spouse_id = get_spouse_id(union, person_id)
        if spouse_id and spouse_id not in spouses:
            spouses.append(spouse_id)
    return spouses


def get_parent_union(graph: FamilyGraph, person_id: str) -> Union | None:
    """The union a person was born into.

    A person listed as a child of several unions is a data error; the first
    such union in store order is used and the rest are ignored.
    """
    found: Union | None = None
    for union in graph.unions:
        if person_id not in union.child_ids:
            continue
        if found is None:
            found = union
        else:
            logger.debug(
                "parent_union_conflict",
                person_id=person_id,
                used_union_id=found.id,
                ignored_union_id=union.id,
            )
    return found


def get_parent_ids(graph: FamilyGraph, person_id: str) -> list[str]:
    """Known partner ids of the parent union (0, 1 or 2 ids)."""
    union = get_parent_union(graph, person_id)
    if union is None:
        return []
    return union.partner_ids


def get_children_ids(graph: FamilyGraph, person_id: str) -> list[str]:
    """Children across all of a person's unions, deduplicated, in order."""
    children: list[str] = []
    seen: set[str] = set()
    for union in get_unions_for_person(graph, person_id):
        for child_id in union.child_ids:
            if child_id not in seen:
                seen.add(child_id)
                children.append(child_id)
    return children


def get_sibling_ids(graph: FamilyGraph, person_id: str) -> list[str]:
    """Other children of every union listing the person as a child."""
    siblings: list[str] = []
    for union in graph.unions:
        if person_id not in union.child_ids:
            continue
        for child_id in union.child_ids:
            if child_id != person_id and child_id not in siblings:
                siblings.append(child_id)
    return siblings


def get_descendant_ids(graph: FamilyGraph, person_id: str) -> list[str]:
    """All descendants of a person, depth-first, each listed once.

    The start person is never included, even when cyclic data leads back
    to them.
    """
    descendants: list[str] = []
    visited: set[str] = {person_id}
    stack = list(reversed(get_children_ids(graph, person_id)))

    while stack:
        current_id = stack.pop()
        if current_id in visited:
            continue
        visited.add(current_id)
        descendants.append(current_id)
        stack.extend(reversed(get_children_ids(graph, current_id)))

    return descendants


def get_ancestors(
    graph: FamilyGraph,
    person_id: str,
    max_generations: int | None = None,
) -> dict[str, int]:
    """Ancestors with their generation distance (1=parent, 2=grandparent).

    Uses BFS over parent unions, so each ancestor keeps its closest
    distance.

    Args:
        graph: Graph to walk
        person_id: Person to start from
        max_generations: Stop after this many generations (None = no limit)

    Returns:
        Dict mapping ancestor_id -> generation distance
    """
    ancestors: dict[str, int] = {}
    visited: set[str] = {person_id}
    queue: deque[tuple[str, int]] = deque([(person_id, 0)])

    while queue:
        current_id, generation = queue.popleft()
        if max_generations is not None and generation >= max_generations:
            continue

        for parent_id in get_parent_ids(graph, current_id):
            if parent_id in visited:
                continue
            visited.add(parent_id)
            ancestors[parent_id] = generation + 1
            queue.append((parent_id, generation + 1))

    return ancestors


def get_parent_candidates(
    graph: FamilyGraph,
    person_id: str,
    gender: Gender | None = None,
) -> list[Person]:
    """People who may be picked as a parent of `person_id`.

    Excludes the person and all of their descendants, which would create a
    cycle. With `gender`, people recorded with a different gender are left
    out too; people with no gender are always offered.
    """
    excluded = {person_id, *get_descendant_ids(graph, person_id)}
    candidates = []
    for person in graph.people:
        if person.id in excluded:
            continue
        if gender is not None and person.gender is not None and person.gender != gender:
            continue
        candidates.append(person)
    return candidates
