"""Conversion of legacy chart files into a `FamilyGraph`.

Old files stored the rendered chart itself: a list of positioned ``person``
and ``union`` nodes plus the edges between them. Current files store only
``people``, ``unions`` and ``sources``; positions are always recomputed by
the layout engines.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import structlog
from pydantic import ValidationError

from .dates import UnknownDate, is_concrete, parse_legacy_lifespan
from .models import FamilyGraph, Person, Union

logger = structlog.get_logger(__name__)

FileFormat = Literal["new", "old", "unknown"]


def _is_new_format(data: Any) -> bool:
    return (
        isinstance(data, Mapping)
        and isinstance(data.get("people"), list)
        and isinstance(data.get("unions"), list)
    )


def _is_old_format(data: Any) -> bool:
    return (
        isinstance(data, Mapping)
        and isinstance(data.get("nodes"), list)
        and isinstance(data.get("edges"), list)
    )


def detect_format(data: Any) -> FileFormat:
    """Tell current files from legacy node/edge files."""
    if isinstance(data, FamilyGraph) or _is_new_format(data):
        return "new"
    if _is_old_format(data):
        return "old"
    return "unknown"


def _sources(data: Any) -> dict[str, Any]:
    sources = data.get("sources") if isinstance(data, Mapping) else None
    return dict(sources) if isinstance(sources, Mapping) else {}


def _node_data(node: Mapping[str, Any]) -> dict[str, Any]:
    data = node.get("data")
    return dict(data) if isinstance(data, Mapping) else {}


def _person_from_node(node: Mapping[str, Any]) -> Person:
    data = _node_data(node)
    attrs: dict[str, Any] = {**data, "id": node["id"]}
    attrs["notes"] = data.get("notes") or data.get("description") or ""

    # Very old files only had a display name
    name = data.get("name")
    if isinstance(name, str) and not (data.get("firstName") or data.get("lastName")):
        first, _, last = name.strip().rpartition(" ")
        attrs["firstName"], attrs["lastName"] = (first, last) if first else (last, "")

    person = Person.model_validate(attrs)

    legacy_dates = data.get("dates")
    if isinstance(legacy_dates, str) and legacy_dates.strip():
        birth, death = parse_legacy_lifespan(legacy_dates)
        updates = {}
        if isinstance(person.birth_date, UnknownDate) and is_concrete(birth):
            updates["birth_date"] = birth
        if isinstance(person.death_date, UnknownDate) and is_concrete(death):
            updates["death_date"] = death
        if updates:
            person = person.model_copy(update=updates)
    return person


def _union_from_node(node: Mapping[str, Any]) -> Union:
    data = _node_data(node)
    return Union.model_validate({
        "id": node["id"],
        "partner1Id": data.get("spouse1Id"),
        "partner2Id": data.get("spouse2Id"),
        "type": data.get("unionType"),
        "startDate": data.get("startDate") or data.get("marriageDate"),
        "startPlace": data.get("startPlace") or data.get("marriagePlace") or "",
        "endDate": data.get("endDate") or data.get("divorceDate"),
        "endReason": data.get("endReason"),
        "childIds": [],
        "sources": data.get("unionSources") or data.get("marriageSources") or [],
    })


def _convert_old_format(data: Mapping[str, Any]) -> FamilyGraph:
    people: list[Person] = []
    unions: list[Union] = []

    for node in data["nodes"]:
        if not isinstance(node, Mapping) or not node.get("id"):
            logger.warning("migration_node_without_id", node=node)
            continue
        kind = node.get("type")
        try:
            if kind == "person":
                people.append(_person_from_node(node))
            elif kind == "union":
                unions.append(_union_from_node(node))
        except ValidationError as exc:
            logger.warning(
                "migration_invalid_node",
                node_id=node["id"],
                node_type=kind,
                errors=exc.error_count(),
            )

    person_ids = {p.id for p in people}
    children: dict[str, list[str]] = {u.id: [] for u in unions}
    names = {p.id: p.display_name for p in people}

    for edge in data["edges"]:
        if not isinstance(edge, Mapping):
            continue
        source, target = edge.get("source"), edge.get("target")
        source_handle = edge.get("sourceHandle")

        if source in children and target in person_ids:
            if source_handle in (None, "", "bottom") and target not in children[source]:
                children[source].append(target)
        elif source in person_ids and target in person_ids:
            if source_handle == "bottom" and edge.get("targetHandle") == "top":
                # No union to attach the child to; left for the user to reconnect
                logger.info(
                    "migration_direct_parent_child_edge",
                    parent_id=source,
                    parent=names[source],
                    child_id=target,
                    child=names[target],
                )

    unions = [u.model_copy(update={"child_ids": children[u.id]}) for u in unions]
    logger.info("migrated_legacy_file", people=len(people), unions=len(unions))
    return FamilyGraph(people=people, unions=unions, sources=_sources(data))


def _validate_entities(items: Any, model: type, entity: str) -> list:
    valid = []
    for index, item in enumerate(items):
        try:
            valid.append(model.model_validate(item))
        except ValidationError as exc:
            node_id = item.get("id") if isinstance(item, Mapping) else None
            logger.warning(
                "migration_invalid_node",
                node_id=node_id,
                node_type=entity,
                index=index,
                errors=exc.error_count(),
            )
    return valid


def _load_new_format(data: Mapping[str, Any]) -> FamilyGraph:
    people = _validate_entities(data["people"], Person, "person")
    unions = _validate_entities(data["unions"], Union, "union")
    return FamilyGraph(people=people, unions=unions, sources=_sources(data))


def migrate_to_new_format(data: Any) -> FamilyGraph:
    """Load any supported file shape as a `FamilyGraph`.

    Current files are validated entity by entity, legacy node/edge files
    are converted, and anything else gives an empty graph (keeping
    ``sources`` when present). Invalid people or unions are skipped with a
    warning in either format. Migrating an already migrated graph changes
    nothing.
    """
    fmt = detect_format(data)
    if fmt == "new":
        if isinstance(data, FamilyGraph):
            return data
        return _load_new_format(data)
    if fmt == "old":
        return _convert_old_format(data)

    logger.warning("migration_unknown_format", kind=type(data).__name__)
    return FamilyGraph(sources=_sources(data))
