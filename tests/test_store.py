"""Tests for family graph mutations."""
from __future__ import annotations

import pytest

from heritage.dates import ExactDate, UnknownDate
from heritage.exceptions import InvalidUnionError, MissingIdentifierError
from heritage.models import FamilyGraph, UnionType
from heritage.store import (
    add_child_to_union,
    add_person,
    add_union,
    create_empty_graph,
    find_person_by_name,
    group_by_surname,
    new_id,
    remove_child_from_union,
    remove_person,
    remove_union,
    update_person,
    update_union,
)


class TestPeople:
    """Tests for person operations."""

    def test_empty_graph(self):
        graph = create_empty_graph()
        assert graph == FamilyGraph()
        assert graph.sources == {}

    def test_new_ids_are_unique(self):
        ids = {new_id() for _ in range(100)}
        assert len(ids) == 100

    def test_add_person_assigns_id(self):
        graph = create_empty_graph()
        updated = add_person(graph, {"firstName": "Archie"})

        assert graph.people == []
        assert len(updated.people) == 1
        person = updated.people[0]
        assert person.first_name == "Archie"
        assert len(person.id) == 36
        assert person.gender is None
        assert isinstance(person.birth_date, UnknownDate)

    def test_add_person_keeps_given_id(self):
        graph = add_person(create_empty_graph(), {"id": "p1", "first_name": "Ruth"})
        assert graph.get_person("p1").first_name == "Ruth"

    def test_update_person(self, durham):
        updated = update_person(durham, "thomas", {"firstName": "Tom", "birth_date": "3 Jun 1927"})

        tom = updated.get_person("thomas")
        assert tom.first_name == "Tom"
        assert tom.last_name == "Durham"
        assert tom.birth_date == ExactDate(year=1927, month=6, day=3)
        assert durham.get_person("thomas").first_name == "Thomas"

    def test_update_never_changes_id(self, durham):
        updated = update_person(durham, "thomas", {"id": "other", "favouriteColour": "blue"})
        assert updated.get_person("thomas") is not None
        assert updated.get_person("other") is None

    def test_update_unknown_person_is_noop(self, durham):
        assert update_person(durham, "nobody", {"firstName": "X"}) is durham

    def test_missing_id_raises(self, durham):
        with pytest.raises(MissingIdentifierError):
            update_person(durham, "", {"firstName": "X"})
        with pytest.raises(ValueError):
            remove_person(durham, None)

    def test_remove_person_cascades(self, durham):
        """Removing a person drops their unions and their child entries."""
        updated = remove_person(durham, "thomas")

        assert not updated.has_person("thomas")
        assert updated.get_union("u-thomas-clara") is None
        assert updated.get_union("u-thomas-grace") is None
        assert updated.get_union("u-archie-ruth").child_ids == ["lily"]
        # Children of the dropped unions are kept as people
        assert updated.has_person("sam")
        assert len(durham.people) == 16

    def test_remove_unknown_person(self, durham):
        updated = remove_person(durham, "nobody")
        assert updated == durham


class TestUnions:
    """Tests for union operations."""

    def test_add_union(self):
        graph = add_person(create_empty_graph(), {"id": "a"})
        graph = add_person(graph, {"id": "b"})
        graph = add_union(graph, {"id": "u", "partner1Id": "a", "partner2Id": "b", "type": "common_law"})

        union = graph.get_union("u")
        assert union.partner_ids == ["a", "b"]
        assert union.type is UnionType.COMMON_LAW

    def test_add_union_assigns_id(self):
        graph = add_union(create_empty_graph(), {"partner1_id": "a"})
        assert graph.unions[0].id
        assert graph.unions[0].partner2_id is None

    def test_same_partner_twice_rejected(self):
        with pytest.raises(InvalidUnionError):
            add_union(create_empty_graph(), {"partner1Id": "a", "partner2Id": "a"})

    def test_update_union(self, durham):
        updated = update_union(durham, "u-thomas-grace", {"endReason": "divorce", "endDate": "1970"})
        union = updated.get_union("u-thomas-grace")
        assert union.end_reason.value == "divorce"
        assert union.end_date == ExactDate(year=1970)
        assert union.child_ids == ["ben"]

    def test_remove_union_keeps_people(self, durham):
        updated = remove_union(durham, "u-thomas-grace")
        assert updated.get_union("u-thomas-grace") is None
        assert updated.has_person("grace")
        assert updated.has_person("ben")

    def test_add_child_is_idempotent(self, durham):
        once = add_child_to_union(durham, "u-thomas-grace", "lily")
        twice = add_child_to_union(once, "u-thomas-grace", "lily")
        assert once.get_union("u-thomas-grace").child_ids == ["ben", "lily"]
        assert twice == once
        assert add_child_to_union(durham, "u-thomas-grace", "ben") is durham

    def test_add_child_unknown_union(self, durham):
        assert add_child_to_union(durham, "u-missing", "ben") is durham

    def test_remove_child(self, durham):
        updated = remove_child_from_union(durham, "u-thomas-clara", "sam")
        assert updated.get_union("u-thomas-clara").child_ids == ["nora"]

    def test_missing_union_id_raises(self, durham):
        with pytest.raises(MissingIdentifierError):
            add_child_to_union(durham, "", "ben")
        with pytest.raises(MissingIdentifierError):
            remove_child_from_union(durham, "u-thomas-clara", "")


class TestLookups:
    """Tests for search and grouping."""

    def test_find_unique_match(self, durham):
        assert find_person_by_name(durham, "thomas").id == "thomas"
        assert find_person_by_name(durham, "Ruth Price").id == "ruth"

    def test_find_ambiguous_or_missing(self, durham):
        assert find_person_by_name(durham, "price") is None
        assert find_person_by_name(durham, "zebedee") is None
        assert find_person_by_name(durham, "  ") is None

    def test_group_by_surname(self, durham):
        graph = add_person(durham, {"id": "anon", "firstName": "Anon"})
        groups = dict(group_by_surname(graph))

        assert list(groups) == ["Bell", "Durham", "Hale", "Moss", "Price", "Unknown", "Ward"]
        assert [p.first_name for p in groups["Price"]] == ["Harold", "Mabel", "Ruth"]
        assert [p.id for p in groups["Unknown"]] == ["anon"]
