"""Family graph mutations.

Every operation is a pure function ``(graph, args) -> graph``: the input
snapshot is never modified, so callers can keep old snapshots for undo.
Unknown ids are tolerated (the graph comes back unchanged); only a missing
id argument is treated as a programmer error.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import structlog
from uuid_utils import uuid7 as _uuid7

from .exceptions import InvalidUnionError, MissingIdentifierError
from .models import FamilyGraph, HeritageModel, Person, Union

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=HeritageModel)


def new_id() -> str:
    """Generate a time-ordered id for a new entity."""
    return str(_uuid7())


def create_empty_graph() -> FamilyGraph:
    return FamilyGraph()


def _require(value: str | None, operation: str, argument: str) -> str:
    if not value:
        raise MissingIdentifierError(operation=operation, argument=argument)
    return value


def _apply_patch(model: M, updates: Mapping[str, Any]) -> M:
    """Return a re-validated copy of `model` with `updates` applied.

    Keys may be field names or their file aliases. The id is never patched.
    """
    fields = type(model).model_fields
    aliases = {name: (info.alias or name) for name, info in fields.items()}
    known = set(aliases.values())

    data = model.model_dump(by_alias=True)
    for key, value in updates.items():
        alias = aliases.get(key, key)
        if alias == "id":
            continue
        if alias not in known:
            logger.debug("patch_unknown_field", model=type(model).__name__, field=key)
            continue
        data[alias] = value
    return type(model).model_validate(data)


# People


def add_person(graph: FamilyGraph, attrs: Mapping[str, Any] | None = None) -> FamilyGraph:
    """Add a person, filling unset fields with defaults.

    Uses ``attrs["id"]`` when given, otherwise assigns a new id. Gender is
    left unset and dates default to ``unknown``.
    """
    data = dict(attrs or {})
    if not data.get("id"):
        data["id"] = new_id()
    person = Person.model_validate(data)
    logger.debug("person_added", person_id=person.id)
    return graph.model_copy(update={"people": [*graph.people, person]})


def update_person(
    graph: FamilyGraph,
    person_id: str,
    updates: Mapping[str, Any],
) -> FamilyGraph:
    """Patch fields of one person, keeping everything not mentioned."""
    _require(person_id, "update_person", "person_id")
    if not graph.has_person(person_id):
        logger.debug("update_unknown_person", person_id=person_id)
        return graph
    people = [
        _apply_patch(p, updates) if p.id == person_id else p
        for p in graph.people
    ]
    return graph.model_copy(update={"people": people})


def remove_person(graph: FamilyGraph, person_id: str) -> FamilyGraph:
    """Remove a person and every reference to them.

    The id is stripped from all child lists, and unions in which the person
    was a partner are dropped.
    """
    _require(person_id, "remove_person", "person_id")
    people = [p for p in graph.people if p.id != person_id]
    unions = [
        u.model_copy(update={"child_ids": [c for c in u.child_ids if c != person_id]})
        for u in graph.unions
        if not u.has_partner(person_id)
    ]
    logger.debug(
        "person_removed",
        person_id=person_id,
        unions_dropped=len(graph.unions) - len(unions),
    )
    return graph.model_copy(update={"people": people, "unions": unions})


# Unions


def add_union(graph: FamilyGraph, attrs: Mapping[str, Any] | None = None) -> FamilyGraph:
    """Record a union between up to two partners.

    Raises:
        InvalidUnionError: If both partner ids are given and equal
    """
    data = dict(attrs or {})
    if not data.get("id"):
        data["id"] = new_id()
    partner1 = data.get("partner1_id", data.get("partner1Id"))
    partner2 = data.get("partner2_id", data.get("partner2Id"))
    if partner1 and partner1 == partner2:
        raise InvalidUnionError(union_id=data["id"], partner_id=partner1)
    union = Union.model_validate(data)
    logger.debug("union_added", union_id=union.id, partners=union.partner_ids)
    return graph.model_copy(update={"unions": [*graph.unions, union]})


def update_union(
    graph: FamilyGraph,
    union_id: str,
    updates: Mapping[str, Any],
) -> FamilyGraph:
    """Patch fields of one union, keeping everything not mentioned."""
    _require(union_id, "update_union", "union_id")
    if graph.get_union(union_id) is None:
        logger.debug("update_unknown_union", union_id=union_id)
        return graph
    unions = [
        _apply_patch(u, updates) if u.id == union_id else u
        for u in graph.unions
    ]
    return graph.model_copy(update={"unions": unions})


def remove_union(graph: FamilyGraph, union_id: str) -> FamilyGraph:
    _require(union_id, "remove_union", "union_id")
    unions = [u for u in graph.unions if u.id != union_id]
    return graph.model_copy(update={"unions": unions})


def add_child_to_union(graph: FamilyGraph, union_id: str, child_id: str) -> FamilyGraph:
    """Append a child to a union's ordered children; no-op if already there."""
    _require(union_id, "add_child_to_union", "union_id")
    _require(child_id, "add_child_to_union", "child_id")
    union = graph.get_union(union_id)
    if union is None or child_id in union.child_ids:
        return graph
    unions = [
        u.model_copy(update={"child_ids": [*u.child_ids, child_id]}) if u.id == union_id else u
        for u in graph.unions
    ]
    return graph.model_copy(update={"unions": unions})


def remove_child_from_union(graph: FamilyGraph, union_id: str, child_id: str) -> FamilyGraph:
    _require(union_id, "remove_child_from_union", "union_id")
    _require(child_id, "remove_child_from_union", "child_id")
    unions = [
        u.model_copy(update={"child_ids": [c for c in u.child_ids if c != child_id]})
        if u.id == union_id else u
        for u in graph.unions
    ]
    return graph.model_copy(update={"unions": unions})


# Lookups used by the sidebar and search box


def find_person_by_name(graph: FamilyGraph, query: str) -> Person | None:
    """Find the single person whose name contains every search term.

    Returns None when nothing or more than one person matches.
    """
    terms = (query or "").lower().split()
    if not terms:
        return None

    matches = []
    for person in graph.people:
        name = " ".join(
            p for p in [person.title, person.first_name, person.middle_name,
                        person.last_name, person.nickname] if p
        ).lower()
        if all(term in name for term in terms):
            matches.append(person)

    return matches[0] if len(matches) == 1 else None


def group_by_surname(graph: FamilyGraph) -> list[tuple[str, list[Person]]]:
    """People grouped by last name, both levels sorted alphabetically."""
    groups: dict[str, list[Person]] = {}
    for person in graph.people:
        surname = person.last_name.strip() or "Unknown"
        groups.setdefault(surname, []).append(person)

    return [
        (surname, sorted(groups[surname], key=lambda p: p.first_name.lower()))
        for surname in sorted(groups, key=str.lower)
    ]
