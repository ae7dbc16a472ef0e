"""Cron expression parsing and evaluation.

A :class:`CronExpression` is an immutable, hashable value built by
:class:`CronParser`. Expressions compare equal when their normalised fields
are equal, whatever text they were written with.

Supported layouts:
    - 5 fields: minute hour day-of-month month day-of-week
    - 6 fields: second minute hour day-of-month month day-of-week, or
      minute hour day-of-month month day-of-week year when the last field
      holds a year (1970-2099)
    - 7 fields: second minute hour day-of-month month day-of-week year
    - Aliases: @yearly, @annually, @monthly, @weekly, @daily, @midnight,
      @hourly, @every_minute, @every_second

Example:
    >>> expr = CronExpression.parse("0 9 * * MON-FRI")
    >>> expr.matches(datetime(2024, 1, 15, 9, 0))
    True
    >>> expr.next(datetime(2024, 1, 15, 9, 0))
    datetime.datetime(2024, 1, 16, 9, 0)
    >>> [run.day for run in expr.iter(datetime(2024, 1, 15), limit=3)]
    [15, 16, 17]
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator

from cronnext.config import get_config
from cronnext.days import DayOfMonthRule, DayOfWeekRule, resolve_days
from cronnext.exceptions import CronParseError
from cronnext.fields import (
    HOUR_FIELD,
    MINUTE_FIELD,
    MONTH_FIELD,
    SECOND_FIELD,
    YEAR_FIELD,
    CronFieldType,
    parse_day_of_month,
    parse_day_of_week,
    parse_generic_field,
)
from cronnext.resolver import next_occurrence


logger = logging.getLogger(__name__)


# =============================================================================
# Cron Parser
# =============================================================================


# A 4-digit token in the supported year range
_YEAR_TOKEN = re.compile(r"(?<!\d)(?:19[7-9]\d|20\d\d)(?!\d)")

_LAYOUT_5 = (
    CronFieldType.MINUTE,
    CronFieldType.HOUR,
    CronFieldType.DAY_OF_MONTH,
    CronFieldType.MONTH,
    CronFieldType.DAY_OF_WEEK,
)
_LAYOUT_6_SECONDS = (CronFieldType.SECOND, *_LAYOUT_5)
_LAYOUT_6_YEAR = (*_LAYOUT_5, CronFieldType.YEAR)
_LAYOUT_7 = (CronFieldType.SECOND, *_LAYOUT_5, CronFieldType.YEAR)


class CronParser:
    """Parser for cron expressions.

    The parser expands aliases, picks the field layout from the number of
    fields and dispatches every field to its handler. Errors carry the
    original text in :attr:`CronParseError.expression`.
    """

    # Predefined expression aliases
    ALIASES: dict[str, str] = {
        "@yearly": "0 0 1 1 *",
        "@annually": "0 0 1 1 *",
        "@monthly": "0 0 1 * *",
        "@weekly": "0 0 * * 0",
        "@daily": "0 0 * * *",
        "@midnight": "0 0 * * *",
        "@hourly": "0 * * * *",
        "@every_minute": "* * * * *",
        "@every_second": "* * * * * *",
    }

    def __init__(self, expression: str) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string.
        """
        self._original = expression.strip()
        self._expression = self._resolve_alias(self._original)

    def _resolve_alias(self, expression: str) -> str:
        """Resolve predefined aliases."""
        return self.ALIASES.get(expression.lower(), expression)

    def _layout(self, parts: list[str]) -> tuple[CronFieldType, ...]:
        if len(parts) == 5:
            return _LAYOUT_5
        if len(parts) == 6:
            if _YEAR_TOKEN.search(parts[-1]):
                return _LAYOUT_6_YEAR
            return _LAYOUT_6_SECONDS
        if len(parts) == 7:
            return _LAYOUT_7
        raise CronParseError(
            f"Invalid number of fields: {len(parts)}. "
            "Expected 5, 6, or 7 fields.",
            self._original,
        )

    def parse(self) -> "CronExpression":
        """Parse the cron expression.

        Returns:
            Parsed CronExpression.

        Raises:
            CronParseError: If expression is invalid.
        """
        parts = self._expression.split()
        layout = self._layout(parts)
        text = dict(zip(layout, parts))
        original = self._original

        expr = CronExpression(
            expression=original,
            seconds=parse_generic_field(
                text.get(CronFieldType.SECOND, "0"), SECOND_FIELD, original
            ),
            minutes=parse_generic_field(text[CronFieldType.MINUTE], MINUTE_FIELD, original),
            hours=parse_generic_field(text[CronFieldType.HOUR], HOUR_FIELD, original),
            day_of_month=parse_day_of_month(text[CronFieldType.DAY_OF_MONTH], original),
            months=parse_generic_field(text[CronFieldType.MONTH], MONTH_FIELD, original),
            day_of_week=parse_day_of_week(text[CronFieldType.DAY_OF_WEEK], original),
            years=parse_generic_field(text.get(CronFieldType.YEAR, "*"), YEAR_FIELD, original),
            has_seconds=CronFieldType.SECOND in text,
        )
        logger.debug(
            "Parsed %r: %d seconds, %d minutes, %d hours, %d months, %d years",
            original,
            len(expr.seconds),
            len(expr.minutes),
            len(expr.hours),
            len(expr.months),
            len(expr.years),
        )
        return expr


# =============================================================================
# Cron Expression
# =============================================================================


@dataclass(frozen=True)
class CronExpression:
    """Parsed cron expression with next-occurrence resolution.

    CronExpression is immutable and thread-safe. It can be used to:
    - Check if a datetime matches the expression
    - Calculate the next matching datetime
    - Iterate over matching datetimes

    Attributes:
        expression: Original expression text (not part of equality).
        seconds: Sorted second values.
        minutes: Sorted minute values.
        hours: Sorted hour values.
        day_of_month: Day-of-month rule.
        months: Sorted month values.
        day_of_week: Day-of-week rule.
        years: Sorted year values.
        has_seconds: Whether the text had a seconds field.
    """

    expression: str = field(compare=False)
    seconds: tuple[int, ...]
    minutes: tuple[int, ...]
    hours: tuple[int, ...]
    day_of_month: DayOfMonthRule
    months: tuple[int, ...]
    day_of_week: DayOfWeekRule
    years: tuple[int, ...]
    has_seconds: bool = field(default=False, compare=False)

    @classmethod
    def parse(cls, expression: str) -> "CronExpression":
        """Parse a cron expression.

        Args:
            expression: Cron expression string.

        Returns:
            Parsed CronExpression.

        Raises:
            CronParseError: If expression is invalid.
        """
        return CronParser(expression).parse()

    # Predefined expression factories
    @classmethod
    def yearly(cls) -> "CronExpression":
        return cls.parse("0 0 1 1 *")

    @classmethod
    def monthly(cls) -> "CronExpression":
        return cls.parse("0 0 1 * *")

    @classmethod
    def weekly(cls) -> "CronExpression":
        return cls.parse("0 0 * * 0")

    @classmethod
    def daily(cls) -> "CronExpression":
        return cls.parse("0 0 * * *")

    @classmethod
    def hourly(cls) -> "CronExpression":
        return cls.parse("0 * * * *")

    @classmethod
    def every_n_minutes(cls, n: int) -> "CronExpression":
        return cls.parse(f"*/{n} * * * *")

    @classmethod
    def every_n_hours(cls, n: int) -> "CronExpression":
        return cls.parse(f"0 */{n} * * *")

    def get_field(self, field_type: CronFieldType) -> tuple[int, ...]:
        """Get the normalised values of a field.

        For day-of-month and day-of-week only the plain values are returned;
        extended directives (``L``, ``15W``, ``5#3``...) live on
        :attr:`day_of_month` and :attr:`day_of_week`.
        """
        if field_type is CronFieldType.DAY_OF_MONTH:
            return tuple(sorted(self.day_of_month.days))
        if field_type is CronFieldType.DAY_OF_WEEK:
            return tuple(sorted(self.day_of_week.days))
        return {
            CronFieldType.SECOND: self.seconds,
            CronFieldType.MINUTE: self.minutes,
            CronFieldType.HOUR: self.hours,
            CronFieldType.MONTH: self.months,
            CronFieldType.YEAR: self.years,
        }[field_type]

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime (to the second) is an instant of this expression.

        Args:
            dt: Datetime to check, in the zone it should be evaluated in.

        Returns:
            True if datetime matches.
        """
        if dt.year not in self.years or dt.month not in self.months:
            return False
        if dt.hour not in self.hours or dt.minute not in self.minutes:
            return False
        if dt.second not in self.seconds:
            return False
        return dt.day in resolve_days(dt.year, dt.month, self.day_of_month, self.day_of_week)

    def next(self, after: datetime | None = None) -> datetime | None:
        """Get next matching datetime.

        Args:
            after: Start searching strictly after this datetime (default: now
                in the configured time zone).

        Returns:
            Next matching datetime, or None if the schedule has no further
            occurrence.
        """
        if after is None:
            after = datetime.now(get_config().tzinfo())
        return next_occurrence(self, after)

    def next_n(self, n: int, after: datetime | None = None) -> list[datetime]:
        """Get next n matching datetimes.

        Args:
            n: Number of matches to find.
            after: Start searching after this datetime.

        Returns:
            List of at most n strictly increasing datetimes.
        """
        return list(self.iter(after, limit=n))

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> "Occurrences":
        """Create a restartable iterable over matching datetimes.

        Args:
            after: Start after this datetime (default: now, fixed at call time).
            limit: Maximum number of matches.

        Returns:
            Occurrences.
        """
        if after is None:
            after = datetime.now(get_config().tzinfo())
        return Occurrences(self, after, limit)

    def __repr__(self) -> str:
        return f"CronExpression({self.expression!r})"

    def __str__(self) -> str:
        return self.expression


# =============================================================================
# Occurrences
# =============================================================================


class Occurrences:
    """Lazy sequence of the occurrences of an expression after an instant.

    Every iteration starts again from ``after``; nothing is stored.
    """

    __slots__ = ("_expression", "_after", "_limit")

    def __init__(
        self,
        expression: CronExpression,
        after: datetime,
        limit: int | None = None,
    ) -> None:
        self._expression = expression
        self._after = after
        self._limit = limit

    def __iter__(self) -> Iterator[datetime]:
        current = self._after
        count = 0
        while self._limit is None or count < self._limit:
            current = next_occurrence(self._expression, current)
            if current is None:
                return
            yield current
            count += 1

    def __repr__(self) -> str:
        return (
            f"Occurrences({self._expression.expression!r}, "
            f"after={self._after.isoformat()}, limit={self._limit})"
        )


# =============================================================================
# Module-level helpers
# =============================================================================


def parse(expression: str) -> CronExpression:
    """Parse a cron expression (see :meth:`CronExpression.parse`)."""
    return CronExpression.parse(expression)


def must_parse(expression: str) -> CronExpression:
    """Parse an expression that is known to be valid.

    Use for constants and presets, where a malformed expression is a
    programming error.

    Raises:
        RuntimeError: Chained from the CronParseError if parsing fails.
    """
    try:
        return CronExpression.parse(expression)
    except CronParseError as exc:
        raise RuntimeError(f"Invalid cron expression {expression!r}: {exc}") from exc


def validate_expression(expression: str) -> list[str]:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        CronExpression.parse(expression)
    except CronParseError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: str) -> bool:
    """Check if a cron expression is valid.

    Args:
        expression: Cron expression to check.

    Returns:
        True if valid.
    """
    try:
        CronExpression.parse(expression)
        return True
    except CronParseError:
        return False
