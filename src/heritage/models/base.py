"""Shared pydantic configuration for graph entities."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HeritageModel(BaseModel):
    """Base for stored entities.

    Fields are snake_case in Python and camelCase in files, and either
    spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with file (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


def blank_if_none(value: Any) -> Any:
    return "" if value is None else value


def none_if_blank(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value
