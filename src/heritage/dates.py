"""Genealogical dates: partial, approximate, unknown and relative.

A `DateValue` is one of five closed variants, discriminated by ``type``:

- ``exact``: year, optional month, optional day
- ``approximate``: year with a variance in years (circa dates)
- ``unknown``: nothing usable; the unparsed text is kept for display
- ``unknown_acknowledged``: the user confirmed there is no known date
- ``alive``: the person is known to be living

Parsing never raises. Anything that cannot be understood comes back as an
``unknown`` value carrying the original text.
"""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DEFAULT_VARIANCE = 5

# Three or four digit years, the range the display format parses back
MIN_YEAR = 100
MAX_YEAR = 9999


class DateKind(str, Enum):
    """Certainty level of a genealogical date."""

    EXACT = "exact"
    APPROXIMATE = "approximate"
    UNKNOWN = "unknown"
    UNKNOWN_ACKNOWLEDGED = "unknown_acknowledged"
    ALIVE = "alive"


class _DateBase(BaseModel):
    display: str = ""

    @property
    def kind(self) -> DateKind:
        return DateKind(self.type)  # type: ignore[attr-defined]

    @model_validator(mode="after")
    def _fill_display(self):
        self.display = format_date(self)
        return self


class ExactDate(_DateBase):
    type: Literal["exact"] = "exact"
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    month: int | None = Field(default=None, ge=1, le=12)
    day: int | None = Field(default=None, ge=1, le=31)

    @field_validator("month", "day", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Legacy files store absent parts as empty strings
        if value in ("", None):
            return None
        return value

    @model_validator(mode="after")
    def _check_calendar(self):
        if self.day is not None:
            if self.month is None:
                raise ValueError("day given without a month")
            if self.day > calendar.monthrange(self.year, self.month)[1]:
                raise ValueError(f"{self.year}-{self.month:02d} has no day {self.day}")
        return self


class ApproximateDate(_DateBase):
    type: Literal["approximate"] = "approximate"
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    variance: int = Field(default=DEFAULT_VARIANCE, ge=0)

    @field_validator("variance", mode="before")
    @classmethod
    def _default_variance(cls, value: Any) -> Any:
        if value in ("", None, 0, "0"):
            return DEFAULT_VARIANCE
        return value


class UnknownDate(_DateBase):
    type: Literal["unknown"] = "unknown"
    text: str = ""

    @model_validator(mode="after")
    def _fill_display(self):
        # Older files only kept the display string of unparsed dates
        if not self.display or self.text:
            self.display = format_date(self)
        return self


class AcknowledgedUnknownDate(_DateBase):
    type: Literal["unknown_acknowledged"] = "unknown_acknowledged"


class LivingDate(_DateBase):
    type: Literal["alive"] = "alive"


DateValue = Annotated[
    Union[ExactDate, ApproximateDate, UnknownDate, AcknowledgedUnknownDate, LivingDate],
    Field(discriminator="type"),
]

_DATE_ADAPTER: TypeAdapter[DateValue] = TypeAdapter(DateValue)


def coerce_date(value: Any) -> Any:
    """Turn whatever a file or form holds into a DateValue.

    ``None`` and missing values become ``unknown``, strings go through
    `parse_date_string`, and malformed mappings degrade to ``unknown``.
    """
    if value is None:
        return UnknownDate()
    if isinstance(value, _DateBase):
        return value
    if isinstance(value, str):
        return parse_date_string(value)
    if isinstance(value, dict):
        try:
            return _DATE_ADAPTER.validate_python(value)
        except ValidationError:
            return UnknownDate(text=str(value.get("display") or ""))
    return UnknownDate(text=str(value))


DateField = Annotated[DateValue, BeforeValidator(coerce_date)]


# Patterns, tried in priority order by parse_date_string
_UNKNOWN_MARKERS = {"?", "unknown", "unk"}
_LIVING_MARKERS = {"alive", "living", "still alive"}

_CIRCA = r"(?:circa\s+|ca\.?\s*|c\.?\s*|about\s+|abt\.?\s*|~\s*)"
_APPROX_RE = re.compile(rf"^{_CIRCA}?([1-9]\d{{2,3}})\s*(?:\+/-|\+-|±)\s*(\d+)$", re.IGNORECASE)
_CIRCA_RE = re.compile(rf"^{_CIRCA}([1-9]\d{{2,3}})$", re.IGNORECASE)
_YEAR_RE = re.compile(r"^([1-9]\d{2,3})$")
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?,?\s+([1-9]\d{2,3})$")
_NUM_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})/([1-9]\d{3})$")
_DAY_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s+([1-9]\d{2,3})$")
_MONTH_DAY_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+([1-9]\d{2,3})$")
_NUM_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/([1-9]\d{3})$")

_OFFSET_RE = re.compile(r"^\+(\d+)([dwmy]?)$", re.IGNORECASE)


def month_number(name: str) -> int | None:
    """Map a month name or abbreviation (at least 3 letters) to 1-12."""
    key = name.strip().rstrip(".").lower()
    if len(key) < 3:
        return None
    for index, month in enumerate(MONTHS):
        if month.lower().startswith(key):
            return index + 1
    return None


def _exact(year: int, month: int | None = None, day: int | None = None) -> ExactDate | None:
    try:
        return ExactDate(year=year, month=month, day=day)
    except ValidationError:
        return None


def _parse_exact(text: str) -> ExactDate | None:
    match = _YEAR_RE.match(text)
    if match:
        return _exact(int(match.group(1)))

    match = _MONTH_YEAR_RE.match(text)
    if match:
        month = month_number(match.group(1))
        if month:
            return _exact(int(match.group(2)), month)

    match = _NUM_MONTH_YEAR_RE.match(text)
    if match:
        return _exact(int(match.group(2)), int(match.group(1)))

    match = _DAY_MONTH_YEAR_RE.match(text)
    if match:
        month = month_number(match.group(2))
        if month:
            return _exact(int(match.group(3)), month, int(match.group(1)))

    match = _MONTH_DAY_YEAR_RE.match(text)
    if match:
        month = month_number(match.group(1))
        if month:
            return _exact(int(match.group(3)), month, int(match.group(2)))

    # Numeric dates are day first: 15/3/1850
    match = _NUM_DMY_RE.match(text)
    if match:
        return _exact(int(match.group(3)), int(match.group(2)), int(match.group(1)))

    return None


def parse_date_string(text: str | None) -> DateValue:
    """Parse free text typed into a date field.

    Handles:
    - unknown markers: ``?``, ``unknown``, ``unk``
    - living markers: ``alive``, ``living``
    - variance: ``1850+-5``, ``1850 ± 5``
    - circa: ``c.1850``, ``circa 1850``, ``~1850``, ``about 1850``
    - exact: ``1850``, ``Mar 1850``, ``3/1850``, ``15 Mar 1850``,
      ``March 15, 1850``, ``15/3/1850``

    Args:
        text: Raw input

    Returns:
        The matching DateValue, or an ``unknown`` value holding the text
    """
    if not text or not text.strip():
        return UnknownDate()

    stripped = " ".join(text.split())
    lowered = stripped.lower()

    if lowered in _UNKNOWN_MARKERS:
        return AcknowledgedUnknownDate()
    if lowered in _LIVING_MARKERS:
        return LivingDate()

    match = _APPROX_RE.match(stripped)
    if match:
        return ApproximateDate(year=int(match.group(1)), variance=int(match.group(2)))

    match = _CIRCA_RE.match(stripped)
    if match:
        return ApproximateDate(year=int(match.group(1)))

    exact = _parse_exact(stripped)
    if exact is not None:
        return exact

    return UnknownDate(text=stripped)


def format_date(value: Any) -> str:
    """Canonical display text of a date.

    Exact and approximate output parses back to an equal value, so the
    display string can be fed straight back into an input field.
    """
    if isinstance(value, ExactDate):
        parts = []
        if value.month:
            if value.day:
                parts.append(str(value.day))
            parts.append(MONTHS[value.month - 1][:3])
        parts.append(str(value.year))
        return " ".join(parts)
    if isinstance(value, ApproximateDate):
        if value.variance == DEFAULT_VARIANCE:
            return f"c. {value.year}"
        return f"c. {value.year}±{value.variance}"
    if isinstance(value, AcknowledgedUnknownDate):
        return "?"
    if isinstance(value, LivingDate):
        return "Living"
    if isinstance(value, UnknownDate):
        if value.text:
            return f'? (couldn\'t parse "{value.text}")'
        return value.display or "Unknown"
    return "Unknown"


def is_concrete(value: Any) -> bool:
    """True for dates an offset can be measured from."""
    return isinstance(value, (ExactDate, ApproximateDate, AcknowledgedUnknownDate))


def year_of(value: Any) -> int | None:
    if isinstance(value, (ExactDate, ApproximateDate)):
        return value.year
    return None


def _add_months(base: date, months: int) -> date:
    total = base.month - 1 + months
    year = base.year + total // 12
    month = total % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_offset(offset_text: str | None, base_date: Any) -> DateValue:
    """Resolve ``+N[dwmy]`` relative to a base date.

    The unit defaults to days. A base without month or day counts from the
    first. Month and year steps clamp to the end of shorter months.

    Returns:
        An exact date, or ``unknown`` when the offset does not parse or the
        base has no usable year
    """
    text = (offset_text or "").strip()
    match = _OFFSET_RE.match(text)
    if match is None or not is_concrete(base_date):
        return UnknownDate(text=text)

    year = year_of(base_date)
    if year is None:
        return UnknownDate(text=text)

    month = getattr(base_date, "month", None) or 1
    day = getattr(base_date, "day", None) or 1
    amount = int(match.group(1))
    unit = (match.group(2) or "d").lower()

    try:
        base = date(year, month, day)
        if unit == "d":
            result = base + timedelta(days=amount)
        elif unit == "w":
            result = base + timedelta(weeks=amount)
        elif unit == "m":
            result = _add_months(base, amount)
        else:
            result = _add_months(base, amount * 12)
    except (ValueError, OverflowError):
        return UnknownDate(text=text)

    return ExactDate(year=result.year, month=result.month, day=result.day)


def format_lifespan(birth: Any, death: Any) -> str:
    """Short ``1850 - 1920`` label for chart nodes."""
    birth_year = year_of(birth)
    if isinstance(death, LivingDate):
        return f"{birth_year} -" if birth_year else ""

    death_year = year_of(death)
    if birth_year and death_year:
        return f"{birth_year} - {death_year}"
    if birth_year:
        return f"{birth_year} -"
    if death_year:
        return f"- {death_year}"
    return ""


_LEGACY_CIRCA_RE = re.compile(r"c\.\s*([1-9]\d{3})")
_LEGACY_BORN_RE = re.compile(r"b\.\s*([1-9]\d{3})")
_LEGACY_DIED_RE = re.compile(r"d\.\s*([1-9]\d{3})")
_LEGACY_RANGE_RE = re.compile(r"([1-9]\d{3})\s*-\s*([1-9]\d{3})")


def parse_legacy_lifespan(text: str | None) -> tuple[DateValue, DateValue]:
    """Split an old free-text ``dates`` field into birth and death dates.

    Understands ``1850 - 1920``, ``b. 1850``, ``d. 1920`` and ``c. 1850``
    (an approximate birth). Missing parts are ``unknown``.
    """
    birth: DateValue = UnknownDate()
    death: DateValue = UnknownDate()
    if not text:
        return birth, death

    match = _LEGACY_CIRCA_RE.search(text)
    if match:
        birth = ApproximateDate(year=int(match.group(1)))

    match = _LEGACY_BORN_RE.search(text)
    if match:
        birth = ExactDate(year=int(match.group(1)))

    match = _LEGACY_DIED_RE.search(text)
    if match:
        death = ExactDate(year=int(match.group(1)))

    match = _LEGACY_RANGE_RE.search(text)
    if match:
        birth = ExactDate(year=int(match.group(1)))
        death = ExactDate(year=int(match.group(2)))

    return birth, death
