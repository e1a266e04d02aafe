"""Person and life event entities."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from ..dates import DateField, DateValue, UnknownDate, resolve_offset
from .base import HeritageModel, blank_if_none, none_if_blank


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EventType(str, Enum):
    """Life events recorded besides birth and death."""

    BAPTISM = "baptism"
    SERVICE = "service"  # military service
    IMMIGRATION = "immigration"
    EMIGRATION = "emigration"
    BURIAL = "burial"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> EventType:
        return cls.OTHER

    @property
    def anchor(self) -> str:
        """Which of the person's dates an offset for this event counts from."""
        return "death" if self is EventType.BURIAL else "birth"


class LifeEvent(HeritageModel):
    """A dated event in a person's life.

    The date is either absolute or given as an offset such as ``+4d`` from
    the birth (or, for burials, the death) date.
    """

    type: EventType = EventType.OTHER
    date: DateField = Field(default_factory=UnknownDate)
    date_offset: str | None = None
    place: str = ""
    sources: list[str] = Field(default_factory=list)

    @field_validator("place", mode="before")
    @classmethod
    def _blank_place(cls, value: Any) -> Any:
        return blank_if_none(value)

    @field_validator("date_offset", mode="before")
    @classmethod
    def _blank_offset(cls, value: Any) -> Any:
        return none_if_blank(value)

    def resolve_date(self, person: Person) -> DateValue:
        """The event date, resolving an offset against the person's anchor date."""
        if not self.date_offset:
            return self.date
        base = person.death_date if self.type.anchor == "death" else person.birth_date
        return resolve_offset(self.date_offset, base)


class Person(HeritageModel):
    """An individual in the family graph."""

    id: str
    title: str = ""
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    maiden_name: str = ""
    nickname: str = ""
    gender: Gender | None = None

    birth_date: DateField = Field(default_factory=UnknownDate)
    death_date: DateField = Field(default_factory=UnknownDate)
    birth_place: str = ""
    death_place: str = ""
    notes: str = ""
    image: str = ""
    color_index: int | None = None

    events: list[LifeEvent] = Field(default_factory=list)
    birth_sources: list[str] = Field(default_factory=list)
    death_sources: list[str] = Field(default_factory=list)

    @field_validator(
        "title", "first_name", "middle_name", "last_name", "maiden_name",
        "nickname", "birth_place", "death_place", "notes", "image",
        mode="before",
    )
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        return blank_if_none(value)

    @field_validator("color_index", mode="before")
    @classmethod
    def _palette_index(cls, value: Any) -> Any:
        # Chosen node colour; anything but a whole number means the default
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @field_validator("gender", mode="before")
    @classmethod
    def _unset_gender(cls, value: Any) -> Any:
        value = none_if_blank(value)
        if isinstance(value, str) and value.lower() not in {g.value for g in Gender}:
            return None
        return value.lower() if isinstance(value, str) else value

    @property
    def display_name(self) -> str:
        """First and last name, as shown on chart nodes."""
        return " ".join(p for p in [self.first_name, self.last_name] if p)

    @property
    def full_name(self) -> str:
        parts = [self.title, self.first_name, self.middle_name, self.last_name]
        name = " ".join(p for p in parts if p)
        if self.nickname:
            name = f'{name} "{self.nickname}"' if name else self.nickname
        return name
