"""The family graph snapshot."""
from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import HeritageModel
from .person import Person
from .union import Union


class FamilyGraph(HeritageModel):
    """People and unions in flat, id-keyed collections.

    Entities refer to each other only by id, so a dangling reference is just
    a lookup that finds nothing. A graph is never edited in place: every
    store operation returns a new snapshot.
    """

    people: list[Person] = Field(default_factory=list)
    unions: list[Union] = Field(default_factory=list)
    sources: dict[str, Any] = Field(default_factory=dict)

    def get_person(self, person_id: str | None) -> Person | None:
        if not person_id:
            return None
        for person in self.people:
            if person.id == person_id:
                return person
        return None

    def get_union(self, union_id: str | None) -> Union | None:
        if not union_id:
            return None
        for union in self.unions:
            if union.id == union_id:
                return union
        return None

    def person_map(self) -> dict[str, Person]:
        """Index of people by id; the first of any duplicate ids wins."""
        index: dict[str, Person] = {}
        for person in self.people:
            index.setdefault(person.id, person)
        return index

    def has_person(self, person_id: str | None) -> bool:
        return self.get_person(person_id) is not None
