"""Union entity: a recorded partnership and the children born into it."""
from __future__ import annotations

from enum import Enum
from typing import Any

import structlog
from pydantic import Field, field_validator, model_validator

from ..dates import DateField, UnknownDate
from .base import HeritageModel, blank_if_none, none_if_blank

logger = structlog.get_logger(__name__)


class UnionType(str, Enum):
    MARRIAGE = "marriage"
    CIVIL_UNION = "civil_union"
    COMMON_LAW = "common_law"
    PARTNERSHIP = "partnership"

    @classmethod
    def _missing_(cls, value: object) -> UnionType:
        return cls.MARRIAGE


class EndReason(str, Enum):
    DIVORCE = "divorce"
    SEPARATION = "separation"
    ANNULMENT = "annulment"
    DEATH = "death"


class Union(HeritageModel):
    """A relationship between up to two partners, with ordered children.

    Either partner may be unknown. When both are known they are different
    people.
    """

    id: str
    partner1_id: str | None = None
    partner2_id: str | None = None
    type: UnionType = UnionType.MARRIAGE

    start_date: DateField = Field(default_factory=UnknownDate)
    start_place: str = ""
    end_date: DateField = Field(default_factory=UnknownDate)
    end_reason: EndReason | None = None

    child_ids: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)

    @field_validator("partner1_id", "partner2_id", mode="before")
    @classmethod
    def _blank_partner(cls, value: Any) -> Any:
        return none_if_blank(value)

    @field_validator("start_place", mode="before")
    @classmethod
    def _blank_place(cls, value: Any) -> Any:
        return blank_if_none(value)

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        return none_if_blank(value) or UnionType.MARRIAGE

    @field_validator("end_reason", mode="before")
    @classmethod
    def _known_end_reason(cls, value: Any) -> Any:
        value = none_if_blank(value)
        if isinstance(value, str) and value not in {r.value for r in EndReason}:
            return None
        return value

    @field_validator("child_ids", "sources", mode="before")
    @classmethod
    def _list_if_none(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _distinct_partners(self):
        if self.partner1_id is not None and self.partner1_id == self.partner2_id:
            logger.warning(
                "union_same_partner_twice",
                union_id=self.id,
                partner_id=self.partner1_id,
            )
            self.partner2_id = None
        return self

    @property
    def partner_ids(self) -> list[str]:
        """Known partner ids, partner1 first."""
        return [p for p in (self.partner1_id, self.partner2_id) if p]

    def has_partner(self, person_id: str) -> bool:
        return person_id in (self.partner1_id, self.partner2_id)
