"""Configuration document models and the merged RuleSet.

The document shape mirrors ``occasions.json``. Every model is frozen and
rejects unknown fields; the loader strips ``$schema`` before validation.

INVARIANT: ``DayOf`` is a tagged union. A ``day_of`` object carrying both
``week`` and ``month`` is rejected, never half-accepted.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    Discriminator,
    Field,
    StrictInt,
    Tag,
    model_serializer,
)

# --- Boolean combinator ---


class MergeStrategy(StrEnum):
    """Boolean combinator joining two match signals."""

    AND = "and"
    OR = "or"
    XOR = "xor"
    NAND = "nand"
    NOR = "nor"

    @classmethod
    def parse(cls, text: str) -> MergeStrategy:
        """Resolve any accepted spelling (``"both"``, ``"&"``, ``"OR"``...)."""
        strategy = MERGE_ALIASES.get(text.strip().lower())
        if strategy is None:
            msg = f"unknown merge strategy {text!r}"
            raise ValueError(msg)
        return strategy

    def apply(self, a: bool, b: bool) -> bool:
        return _MERGE_OPS[self](a, b)


MERGE_ALIASES: dict[str, MergeStrategy] = {
    "and": MergeStrategy.AND,
    "both": MergeStrategy.AND,
    "&": MergeStrategy.AND,
    "&&": MergeStrategy.AND,
    "or": MergeStrategy.OR,
    "any": MergeStrategy.OR,
    "|": MergeStrategy.OR,
    "||": MergeStrategy.OR,
    "xor": MergeStrategy.XOR,
    "either": MergeStrategy.XOR,
    "^": MergeStrategy.XOR,
    "nand": MergeStrategy.NAND,
    "nor": MergeStrategy.NOR,
    "neither": MergeStrategy.NOR,
}

_MERGE_OPS: dict[MergeStrategy, Callable[[bool, bool], bool]] = {
    MergeStrategy.AND: lambda a, b: a and b,
    MergeStrategy.OR: lambda a, b: a or b,
    MergeStrategy.XOR: lambda a, b: a != b,
    MergeStrategy.NAND: lambda a, b: not (a and b),
    MergeStrategy.NOR: lambda a, b: not (a or b),
}


# --- Calendar names ---


class Weekday(StrEnum):
    """Days of the week, Monday first (matches :meth:`date.weekday`)."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, text: str) -> Weekday:
        """Accept full names and three-letter abbreviations, any case."""
        day = _WEEKDAY_NAMES.get(text.strip().lower())
        if day is None:
            msg = f"unknown weekday {text!r}"
            raise ValueError(msg)
        return day

    @classmethod
    def of(cls, when: date) -> Weekday:
        return _WEEKDAYS[when.weekday()]

    @property
    def days_from_monday(self) -> int:
        """Days since Monday (Monday = 0)."""
        return _WEEKDAYS.index(self)


class Month(StrEnum):
    """Calendar months."""

    JANUARY = "January"
    FEBRUARY = "February"
    MARCH = "March"
    APRIL = "April"
    MAY = "May"
    JUNE = "June"
    JULY = "July"
    AUGUST = "August"
    SEPTEMBER = "September"
    OCTOBER = "October"
    NOVEMBER = "November"
    DECEMBER = "December"

    @classmethod
    def parse(cls, text: str) -> Month:
        """Accept full names and three-letter abbreviations, any case."""
        month = _MONTH_NAMES.get(text.strip().lower())
        if month is None:
            msg = f"unknown month {text!r}"
            raise ValueError(msg)
        return month

    @classmethod
    def of(cls, when: date) -> Month:
        return _MONTHS[when.month - 1]


_WEEKDAYS: list[Weekday] = list(Weekday)
_MONTHS: list[Month] = list(Month)


def _name_table(members: list[Any]) -> dict[str, Any]:
    table: dict[str, Any] = {}
    for member in members:
        table[member.value.lower()] = member
        table[member.value[:3].lower()] = member
    return table


_WEEKDAY_NAMES: dict[str, Weekday] = _name_table(_WEEKDAYS)
_MONTH_NAMES: dict[str, Month] = _name_table(_MONTHS)


def _parsing(parse: Callable[[str], Any]) -> Callable[[Any], Any]:
    """Build a before-validator that routes strings through *parse*."""

    def validate(value: Any) -> Any:
        if isinstance(value, str):
            return parse(value)
        return value

    return validate


MergeField = Annotated[MergeStrategy, BeforeValidator(_parsing(MergeStrategy.parse))]
WeekdayField = Annotated[Weekday, BeforeValidator(_parsing(Weekday.parse))]
MonthField = Annotated[Month, BeforeValidator(_parsing(Month.parse))]
DayOfMonthNumber = Annotated[StrictInt, Field(ge=1, le=31)]
IsoWeekNumber = Annotated[StrictInt, Field(ge=1, le=53)]


# --- Rule pieces ---


class DayOfWeek(BaseModel):
    """``{"week": [...]}``: match on weekday."""

    model_config = {"frozen": True, "extra": "forbid"}

    week: frozenset[WeekdayField]


class DayOfMonth(BaseModel):
    """``{"month": [...]}``: match on day of month."""

    model_config = {"frozen": True, "extra": "forbid"}

    month: frozenset[DayOfMonthNumber]


def _day_of_tag(value: Any) -> str | None:
    if isinstance(value, DayOfWeek):
        return "week"
    if isinstance(value, DayOfMonth):
        return "month"
    if isinstance(value, dict) and len(value) == 1:
        key = next(iter(value))
        if key in ("week", "month"):
            return key
    return None


DayOf = Annotated[
    Union[Annotated[DayOfWeek, Tag("week")], Annotated[DayOfMonth, Tag("month")]],
    Discriminator(
        _day_of_tag,
        custom_error_type="day_of_variant",
        custom_error_message="day_of must hold exactly one of 'week' or 'month'",
    ),
]


class TimeSpec(BaseModel):
    """Calendar predicate. Absent (or empty) fields are unconstrained."""

    model_config = {"frozen": True, "extra": "forbid"}

    day_of: DayOf | None = None
    week: frozenset[IsoWeekNumber] | None = None
    month: frozenset[MonthField] | None = None
    year: frozenset[StrictInt] | None = None


class Command(BaseModel):
    """An external command run through a shell."""

    model_config = {"frozen": True, "extra": "forbid"}

    run: str
    shell: str | None = None
    shell_flags: tuple[str, ...] | None = None


class Condition(BaseModel):
    """Dynamic predicate: shell exit status and/or a boolean expression."""

    model_config = {"frozen": True, "extra": "forbid"}

    shell: Command | None = None
    predicate: str | None = None
    merge_strategy: MergeField = MergeStrategy.OR


class Rule(BaseModel):
    """One message candidate with optional calendar/condition gating."""

    model_config = {"frozen": True, "extra": "forbid"}

    message: str | None = None
    command: Command | None = None
    time: TimeSpec | None = None
    condition: Condition | None = None
    merge_strategy: MergeField = MergeStrategy.OR


# --- Selection policy ---


class SelectionKind(StrEnum):
    FIRST = "first"
    LAST = "last"
    ALL = "all"
    RANDOM = "random"


class MultipleBehavior(BaseModel):
    """How to choose among several matching rules.

    Wire format is ``"first"``, ``"last"``, ``"random"`` or
    ``{"all": {"seperator": "..."}}`` (sic). A bare ``"all"`` means an
    empty separator. Documents go through :meth:`from_wire`; the field
    names below are never accepted from JSON.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    kind: SelectionKind = SelectionKind.ALL
    separator: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> MultipleBehavior:
        """Decode the JSON form, rejecting anything else."""
        if isinstance(data, str):
            try:
                return cls(kind=SelectionKind(data))
            except ValueError:
                msg = f"unknown multiple_behavior {data!r}"
                raise ValueError(msg) from None
        if isinstance(data, dict) and list(data) == ["all"]:
            body = data["all"] if data["all"] is not None else {}
            if not isinstance(body, dict) or set(body) - {"seperator"}:
                msg = "'all' accepts only a 'seperator' field"
                raise ValueError(msg)
            separator = body.get("seperator", "")
            if not isinstance(separator, str):
                msg = "'seperator' must be a string"
                raise ValueError(msg)
            return cls(kind=SelectionKind.ALL, separator=separator)
        msg = 'multiple_behavior must be "first", "last", "random", "all" or {"all": {...}}'
        raise ValueError(msg)

    @model_serializer
    def _to_wire(self) -> Any:
        if self.kind is SelectionKind.ALL:
            return {"all": {"seperator": self.separator}}
        return self.kind.value


def _behavior_from_wire(value: Any) -> Any:
    if isinstance(value, MultipleBehavior):
        return value
    return MultipleBehavior.from_wire(value)


MultipleBehaviorField = Annotated[MultipleBehavior, BeforeValidator(_behavior_from_wire)]


# --- Documents ---


class ConfigDocument(BaseModel):
    """One parsed ``occasions.json`` file, before or after merging imports."""

    model_config = {"frozen": True, "extra": "forbid"}

    dates: tuple[Rule, ...] = ()
    multiple_behavior: MultipleBehaviorField | None = None
    week_start_day: WeekdayField | None = None
    imports: tuple[Path, ...] = ()

    def merged_with(self, other: ConfigDocument) -> ConfigDocument:
        """Append *other*'s rules. Singular options already set here win."""
        return self.model_copy(
            update={
                "dates": self.dates + other.dates,
                "multiple_behavior": (
                    self.multiple_behavior
                    if self.multiple_behavior is not None
                    else other.multiple_behavior
                ),
                "week_start_day": (
                    self.week_start_day
                    if self.week_start_day is not None
                    else other.week_start_day
                ),
            }
        )


class RuleSet(BaseModel):
    """The flattened, read-only rule set for one invocation."""

    model_config = {"frozen": True}

    rules: tuple[Rule, ...] = ()
    multiple_behavior: MultipleBehaviorField = Field(default_factory=MultipleBehavior)
    week_start_day: Weekday = Weekday.SUNDAY

    @classmethod
    def from_document(cls, document: ConfigDocument) -> RuleSet:
        """Fill unset singular options with their defaults."""
        return cls(
            rules=document.dates,
            multiple_behavior=document.multiple_behavior or MultipleBehavior(),
            week_start_day=document.week_start_day or Weekday.SUNDAY,
        )
