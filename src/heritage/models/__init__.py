"""Pydantic entity models for the family graph."""

from .base import HeritageModel
from .graph import FamilyGraph
from .person import EventType, Gender, LifeEvent, Person
from .union import EndReason, Union, UnionType

__all__ = [
    "HeritageModel",
    "FamilyGraph",
    "Person",
    "LifeEvent",
    "Gender",
    "EventType",
    "Union",
    "UnionType",
    "EndReason",
]
