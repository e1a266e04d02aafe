"""Shared family graph fixtures.

The ``durham`` family:

    Walter + Edith            Harold + Mabel
          |                        |
    Archie, June                 Ruth
      |
    Archie + Ruth  ->  Thomas (focus), Lily
    Thomas + Clara ->  Sam, Nora
    Thomas + Grace ->  Ben
    Sam + Alice    ->  Leo
"""
from __future__ import annotations

import pytest

from heritage.models import FamilyGraph, Person, Union


def make_person(person_id: str, first: str, last: str = "Durham", gender: str | None = None, **extra) -> Person:
    return Person(id=person_id, first_name=first, last_name=last, gender=gender, **extra)


def make_union(union_id: str, p1: str | None, p2: str | None, children=()) -> Union:
    return Union(id=union_id, partner1_id=p1, partner2_id=p2, child_ids=list(children))


@pytest.fixture
def durham() -> FamilyGraph:
    people = [
        make_person("walter", "Walter", gender="male", birth_date="1870", death_date="1940"),
        make_person("edith", "Edith", "Hale", gender="female"),
        make_person("harold", "Harold", "Price", gender="male"),
        make_person("mabel", "Mabel", "Price", gender="female"),
        make_person("archie", "Archie", gender="male", birth_date="12 May 1900"),
        make_person("june", "June", gender="female"),
        make_person("ruth", "Ruth", "Price", gender="female"),
        make_person("thomas", "Thomas", gender="male", birth_date="c. 1927", death_date="2005"),
        make_person("lily", "Lily", gender="female"),
        make_person("clara", "Clara", "Bell", gender="female"),
        make_person("grace", "Grace", "Ward", gender="female"),
        make_person("sam", "Sam", gender="male"),
        make_person("nora", "Nora", gender="female"),
        make_person("ben", "Ben", gender="male"),
        make_person("alice", "Alice", "Moss", gender="female"),
        make_person("leo", "Leo", gender="male"),
    ]
    unions = [
        make_union("u-walter-edith", "walter", "edith", ["archie", "june"]),
        make_union("u-harold-mabel", "harold", "mabel", ["ruth"]),
        make_union("u-archie-ruth", "archie", "ruth", ["thomas", "lily"]),
        make_union("u-thomas-clara", "thomas", "clara", ["sam", "nora"]),
        make_union("u-thomas-grace", "thomas", "grace", ["ben"]),
        make_union("u-sam-alice", "sam", "alice", ["leo"]),
    ]
    return FamilyGraph(people=people, unions=unions)


@pytest.fixture
def single_parent() -> FamilyGraph:
    """A mother with two children and no recorded partner."""
    return FamilyGraph(
        people=[
            make_person("mary", "Mary", "Stone", gender="female"),
            make_person("kid1", "Kid", "Stone"),
            make_person("kid2", "Other", "Stone"),
        ],
        unions=[make_union("u-mary", "mary", None, ["kid1", "kid2"])],
    )


@pytest.fixture
def cyclic() -> FamilyGraph:
    """Malformed data: A is B's child and B is A's child."""
    return FamilyGraph(
        people=[make_person("a", "Ann"), make_person("b", "Bob")],
        unions=[
            make_union("u-a", "a", None, ["b"]),
            make_union("u-b", "b", None, ["a"]),
        ],
    )


def padded_intervals_overlap(nodes, gutter: float) -> bool:
    """True if any two boxes on the same row overlap once padded by half a gutter."""
    rows: dict[float, list] = {}
    for node in nodes:
        rows.setdefault(node.y, []).append(node)
    for row in rows.values():
        spans = sorted((n.x - n.width / 2 - gutter / 2, n.x + n.width / 2 + gutter / 2) for n in row)
        for (_, end), (start, _) in zip(spans, spans[1:]):
            if start < end - 1e-9:
                return True
    return False
