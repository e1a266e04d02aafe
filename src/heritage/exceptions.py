from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MissingIdentifierError(ValueError):
    """Raised when a store operation is called without a required id.

    This is a caller bug, not bad data: dangling or unknown ids are tolerated
    everywhere, only an absent id argument is rejected.
    """

    operation: str
    argument: str

    def __str__(self) -> str:  # pragma: no cover - human readable
        return f"{self.operation}() requires a non-empty {self.argument}"


@dataclass
class InvalidUnionError(ValueError):
    """Raised when a union is created with the same person as both partners."""

    union_id: str
    partner_id: str

    def __str__(self) -> str:  # pragma: no cover - human readable
        return f"union {self.union_id!r} names {self.partner_id!r} as both partners"
