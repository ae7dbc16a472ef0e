"""Field grammar for cron expressions.

Each whitespace-separated field of an expression is described by a
:class:`FieldDescriptor`. Parsing a field splits it on commas, classifies every
entry with :func:`match_entry` and hands the resulting :class:`Directive`
objects to a field handler:

    Field         Values            Layouts                     Extra directives
    ──────────────────────────────────────────────────────────────────────────────
    Second        0-59              * ? n a-b */n a/n a-b/n     -
    Minute        0-59              (same)                      -
    Hour          0-23              (same)                      -
    Day of Month  1-31              (same)                      L LW L-n nW
    Month         1-12 or JAN-DEC   (same)                      -
    Day of Week   0-7 or SUN-SAT    (same)                      nL n#w
    Year          1970-2099         (same)                      -

The layout patterns are compiled once per descriptor at import time, so
parsing never compiles a regular expression.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping

from cronnext.days import DayOfMonthRule, DayOfWeekRule
from cronnext.exceptions import CronParseError
from cronnext.tokens import (
    DAY_OF_WEEK_NAMES,
    DAY_OF_WEEK_TOKENS,
    MONTH_NAMES,
    MONTH_TOKENS,
)


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """Types of cron fields."""

    SECOND = auto()
    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()
    YEAR = auto()


# =============================================================================
# Layouts
# =============================================================================


_VALUE = "%value%"

LAYOUT_WILDCARD = r"\*|\?"
LAYOUT_VALUE = r"(%value%)"
LAYOUT_RANGE = r"(%value%)-(%value%)"
LAYOUT_WILDCARD_STEP = r"\*/(\d+)"
LAYOUT_VALUE_STEP = r"(%value%)/(\d+)"
LAYOUT_RANGE_STEP = r"(%value%)-(%value%)/(\d+)"

# Day-of-month directives
LAYOUT_LAST_DAY = r"l"
LAYOUT_LAST_WORKDAY = r"lw"
LAYOUT_LAST_NTH_DAY = r"l-(\d{1,2})"
LAYOUT_WORKDAY = r"(%value%)w"

# Day-of-week directives
LAYOUT_LAST_WEEKDAY = r"(%value%)l"
LAYOUT_NTH_WEEKDAY = r"(%value%)#([1-5])"


def _compile(layout: str, value_pattern: str) -> re.Pattern[str]:
    return re.compile(layout.replace(_VALUE, value_pattern))


@dataclass(frozen=True)
class FieldLayouts:
    """Compiled layout patterns of one field, matched with ``fullmatch``."""

    wildcard: re.Pattern[str]
    value: re.Pattern[str]
    range: re.Pattern[str]
    wildcard_step: re.Pattern[str]
    value_step: re.Pattern[str]
    range_step: re.Pattern[str]

    @classmethod
    def compile(cls, value_pattern: str) -> "FieldLayouts":
        return cls(
            wildcard=_compile(LAYOUT_WILDCARD, value_pattern),
            value=_compile(LAYOUT_VALUE, value_pattern),
            range=_compile(LAYOUT_RANGE, value_pattern),
            wildcard_step=_compile(LAYOUT_WILDCARD_STEP, value_pattern),
            value_step=_compile(LAYOUT_VALUE_STEP, value_pattern),
            range_step=_compile(LAYOUT_RANGE_STEP, value_pattern),
        )


# =============================================================================
# Field Descriptors
# =============================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of a cron field.

    Attributes:
        field_type: Kind of field.
        name: Name used in error messages.
        min_value: Smallest legal value.
        max_value: Largest legal value.
        value_pattern: Regular expression alternatives for a single value.
        tokens: Textual tokens mapped to values (month and weekday names).
    """

    field_type: CronFieldType
    name: str
    min_value: int
    max_value: int
    value_pattern: str
    tokens: Mapping[str, int] = field(default_factory=dict, compare=False, repr=False)
    layouts: FieldLayouts = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "layouts", FieldLayouts.compile(self.value_pattern))

    @property
    def default_values(self) -> tuple[int, ...]:
        """Full range of the field, used when the field is a wildcard."""
        return tuple(range(self.min_value, self.max_value + 1))

    def to_int(self, token: str) -> int:
        """Convert a lower-cased value token to its integer value."""
        if token in self.tokens:
            return self.tokens[token]
        return int(token)


SECOND_FIELD = FieldDescriptor(
    CronFieldType.SECOND, "second", 0, 59,
    r"0?[0-9]|[1-5][0-9]",
)
MINUTE_FIELD = FieldDescriptor(
    CronFieldType.MINUTE, "minute", 0, 59,
    r"0?[0-9]|[1-5][0-9]",
)
HOUR_FIELD = FieldDescriptor(
    CronFieldType.HOUR, "hour", 0, 23,
    r"0?[0-9]|1[0-9]|2[0-3]",
)
DAY_OF_MONTH_FIELD = FieldDescriptor(
    CronFieldType.DAY_OF_MONTH, "day-of-month", 1, 31,
    r"0?[1-9]|[12][0-9]|3[01]",
)
MONTH_FIELD = FieldDescriptor(
    CronFieldType.MONTH, "month", 1, 12,
    r"0?[1-9]|1[012]|" + "|".join(MONTH_NAMES),
    tokens=MONTH_TOKENS,
)
DAY_OF_WEEK_FIELD = FieldDescriptor(
    CronFieldType.DAY_OF_WEEK, "day-of-week", 0, 6,
    r"0?[0-7]|" + "|".join(DAY_OF_WEEK_NAMES),
    tokens=DAY_OF_WEEK_TOKENS,
)
YEAR_FIELD = FieldDescriptor(
    CronFieldType.YEAR, "year", 1970, 2099,
    r"19[7-9][0-9]|20[0-9]{2}",
)

FIELD_DESCRIPTORS: dict[CronFieldType, FieldDescriptor] = {
    d.field_type: d
    for d in (
        SECOND_FIELD,
        MINUTE_FIELD,
        HOUR_FIELD,
        DAY_OF_MONTH_FIELD,
        MONTH_FIELD,
        DAY_OF_WEEK_FIELD,
        YEAR_FIELD,
    )
}

_LAST_DAY = re.compile(LAYOUT_LAST_DAY)
_LAST_WORKDAY = re.compile(LAYOUT_LAST_WORKDAY)
_LAST_NTH_DAY = re.compile(LAYOUT_LAST_NTH_DAY)
_WORKDAY = _compile(LAYOUT_WORKDAY, DAY_OF_MONTH_FIELD.value_pattern)
_LAST_WEEKDAY = _compile(LAYOUT_LAST_WEEKDAY, DAY_OF_WEEK_FIELD.value_pattern)
_NTH_WEEKDAY = _compile(LAYOUT_NTH_WEEKDAY, DAY_OF_WEEK_FIELD.value_pattern)


# =============================================================================
# Directives
# =============================================================================


class DirectiveKind(Enum):
    """Classification of one comma-separated field entry."""

    WILDCARD = auto()
    SINGLE = auto()
    SPAN = auto()
    UNRECOGNIZED = auto()


@dataclass(frozen=True)
class Directive:
    """One classified field entry.

    ``text`` is the entry as written; for UNRECOGNIZED entries the field
    handler matches it against the field's extra directives.
    """

    kind: DirectiveKind
    text: str
    first: int = 0
    last: int = 0
    step: int = 1

    def expand(self, descriptor: FieldDescriptor) -> list[int]:
        """Values selected by a WILDCARD, SINGLE or SPAN directive."""
        if self.kind is DirectiveKind.SINGLE:
            return [self.first]
        if self.kind is DirectiveKind.UNRECOGNIZED:
            return []
        if self.first <= self.last:
            sequence = list(range(self.first, self.last + 1))
        else:
            # Reversed range wraps around, e.g. FRI-MON
            sequence = list(range(self.first, descriptor.max_value + 1))
            sequence.extend(range(descriptor.min_value, self.last + 1))
        sequence = sequence[:: self.step]
        if descriptor.field_type is CronFieldType.DAY_OF_WEEK:
            return [value % 7 for value in sequence]
        return sequence


def _interval(raw: str, entry: str, descriptor: FieldDescriptor, expression: str) -> int:
    step = int(raw)
    if step < 1 or step > descriptor.max_value:
        raise CronParseError(f"invalid interval {entry}", expression, descriptor.name)
    return step


def _range_end(token: str, descriptor: FieldDescriptor) -> int:
    # MON-7 runs to the end of the week rather than wrapping onto Sunday alone
    if descriptor.field_type is CronFieldType.DAY_OF_WEEK and token in ("7", "07"):
        return 7
    return descriptor.to_int(token)


def match_entry(entry: str, descriptor: FieldDescriptor, expression: str = "") -> Directive:
    """Classify a single comma-separated entry of a field.

    Layouts are tried in a fixed order: wildcard, value, range, wildcard with
    step, value with step, range with step. Anything else is returned as
    UNRECOGNIZED for the field handler to interpret.

    Raises:
        CronParseError: If a step is outside ``1..descriptor.max_value``.
    """
    normal = entry.lower()
    layouts = descriptor.layouts
    to_int = descriptor.to_int

    if layouts.wildcard.fullmatch(normal):
        return Directive(
            DirectiveKind.WILDCARD, entry,
            descriptor.min_value, descriptor.max_value,
        )

    if layouts.value.fullmatch(normal):
        return Directive(DirectiveKind.SINGLE, entry, to_int(normal))

    m = layouts.range.fullmatch(normal)
    if m:
        return Directive(
            DirectiveKind.SPAN, entry,
            to_int(m.group(1)), _range_end(m.group(2), descriptor),
        )

    m = layouts.wildcard_step.fullmatch(normal)
    if m:
        return Directive(
            DirectiveKind.SPAN, entry,
            descriptor.min_value, descriptor.max_value,
            _interval(m.group(1), normal, descriptor, expression),
        )

    m = layouts.value_step.fullmatch(normal)
    if m:
        return Directive(
            DirectiveKind.SPAN, entry,
            to_int(m.group(1)), descriptor.max_value,
            _interval(m.group(2), normal, descriptor, expression),
        )

    m = layouts.range_step.fullmatch(normal)
    if m:
        return Directive(
            DirectiveKind.SPAN, entry,
            to_int(m.group(1)), _range_end(m.group(2), descriptor),
            _interval(m.group(3), normal, descriptor, expression),
        )

    return Directive(DirectiveKind.UNRECOGNIZED, entry)


def parse_entries(text: str, descriptor: FieldDescriptor, expression: str = "") -> list[Directive]:
    """Split a field on commas and classify every entry."""
    entries = [entry for entry in text.split(",") if entry]
    if not entries:
        raise CronParseError(
            f"{descriptor.name} field: missing directive", expression, descriptor.name
        )
    return [match_entry(entry, descriptor, expression) for entry in entries]


def _syntax_error(entry: str, descriptor: FieldDescriptor, expression: str) -> CronParseError:
    return CronParseError(
        f"syntax error in {descriptor.name} field: '{entry}'", expression, descriptor.name
    )


# =============================================================================
# Field Handlers
# =============================================================================


def parse_generic_field(
    text: str,
    descriptor: FieldDescriptor,
    expression: str = "",
) -> tuple[int, ...]:
    """Parse a second, minute, hour, month or year field.

    Returns:
        Sorted, de-duplicated values. A wildcard anywhere in the list selects
        the full range of the field.
    """
    directives = parse_entries(text, descriptor, expression)
    values: set[int] = set()
    wildcard = False

    for directive in directives:
        if directive.kind is DirectiveKind.UNRECOGNIZED:
            raise _syntax_error(directive.text, descriptor, expression)
        if directive.kind is DirectiveKind.WILDCARD:
            wildcard = True
        values.update(directive.expand(descriptor))

    if wildcard:
        return descriptor.default_values
    return tuple(sorted(values))


def parse_day_of_month(text: str, expression: str = "") -> DayOfMonthRule:
    """Parse the day-of-month field, including ``L``, ``LW``, ``L-n`` and ``nW``."""
    descriptor = DAY_OF_MONTH_FIELD
    days: set[int] = set()
    workdays: set[int] = set()
    last_day = False
    last_workday = False
    last_nth_day = 0
    restricted = True

    for directive in parse_entries(text, descriptor, expression):
        if directive.kind is DirectiveKind.WILDCARD:
            restricted = False
            days.update(directive.expand(descriptor))
        elif directive.kind is not DirectiveKind.UNRECOGNIZED:
            days.update(directive.expand(descriptor))
        else:
            normal = directive.text.lower()
            if _LAST_DAY.fullmatch(normal):
                last_day = True
                continue
            if _LAST_WORKDAY.fullmatch(normal):
                last_workday = True
                continue
            m = _LAST_NTH_DAY.fullmatch(normal)
            if m:
                # L-0 is the last day itself
                if int(m.group(1)) == 0:
                    last_day = True
                else:
                    last_nth_day = int(m.group(1))
                continue
            m = _WORKDAY.fullmatch(normal)
            if m:
                workdays.add(descriptor.to_int(m.group(1)))
                continue
            raise _syntax_error(directive.text, descriptor, expression)

    return DayOfMonthRule(
        days=frozenset(days),
        workdays=frozenset(workdays),
        last_day=last_day,
        last_workday=last_workday,
        last_nth_day=last_nth_day,
        restricted=restricted,
    )


def parse_day_of_week(text: str, expression: str = "") -> DayOfWeekRule:
    """Parse the day-of-week field, including ``nL`` and ``n#w``.

    Weekday 7 is folded onto 0 (Sunday) everywhere.
    """
    descriptor = DAY_OF_WEEK_FIELD
    days: set[int] = set()
    last_weekdays: set[int] = set()
    nth_weekdays: set[int] = set()
    restricted = True

    for directive in parse_entries(text, descriptor, expression):
        if directive.kind is DirectiveKind.WILDCARD:
            restricted = False
            days.update(directive.expand(descriptor))
        elif directive.kind is not DirectiveKind.UNRECOGNIZED:
            days.update(directive.expand(descriptor))
        else:
            normal = directive.text.lower()
            m = _LAST_WEEKDAY.fullmatch(normal)
            if m:
                last_weekdays.add(descriptor.to_int(m.group(1)) % 7)
                continue
            m = _NTH_WEEKDAY.fullmatch(normal)
            if m:
                weekday = descriptor.to_int(m.group(1)) % 7
                week = int(m.group(2))
                nth_weekdays.add((week - 1) * 7 + weekday)
                continue
            raise _syntax_error(directive.text, descriptor, expression)

    return DayOfWeekRule(
        days=frozenset(days),
        nth_weekdays=frozenset(nth_weekdays),
        last_weekdays=frozenset(last_weekdays),
        restricted=restricted,
    )
