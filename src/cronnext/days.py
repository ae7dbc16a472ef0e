"""Day-of-month resolution.

The day-of-month and day-of-week fields cannot be checked independently of the
calendar: ``L`` depends on the month length, ``15W`` on the weekday of the
15th, ``5#3`` on the weekday of the 1st. This module turns the two parsed
fields into the concrete, sorted days of a given month.

Resolution is a pure function of ``(year, month, rules)`` and is memoised by a
process-wide ``functools.lru_cache``, so expressions stay immutable and can be
shared between threads.

As in crontab, when both fields are restricted a day matches if *either*
field matches it.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, FrozenSet

from cronnext.config import day_cache_size_from_env

if TYPE_CHECKING:
    from cronnext.expression import CronExpression


logger = logging.getLogger(__name__)


# =============================================================================
# Rules
# =============================================================================


@dataclass(frozen=True)
class DayOfMonthRule:
    """Parsed day-of-month field.

    Attributes:
        days: Plain days of month (1-31).
        workdays: Days to be shifted to the nearest weekday (``15W``).
        last_day: ``L`` is present.
        last_workday: ``LW`` is present.
        last_nth_day: ``n`` of ``L-n``, 0 when absent.
        restricted: False only when the field contained a wildcard.
    """

    days: FrozenSet[int] = frozenset()
    workdays: FrozenSet[int] = frozenset()
    last_day: bool = False
    last_workday: bool = False
    last_nth_day: int = 0
    restricted: bool = True


@dataclass(frozen=True)
class DayOfWeekRule:
    """Parsed day-of-week field (0 = Sunday).

    Attributes:
        days: Plain weekdays.
        nth_weekdays: ``v#w`` entries encoded as ``(w - 1) * 7 + v``.
        last_weekdays: Weekdays of ``vL`` entries.
        restricted: False only when the field contained a wildcard.
    """

    days: FrozenSet[int] = frozenset()
    nth_weekdays: FrozenSet[int] = frozenset()
    last_weekdays: FrozenSet[int] = frozenset()
    restricted: bool = True


# =============================================================================
# Calendar helpers
# =============================================================================


def _month_shape(year: int, month: int) -> tuple[int, int]:
    """Return (cron weekday of the 1st, number of days)."""
    weekday, days_in_month = calendar.monthrange(year, month)
    # calendar counts from Monday, cron from Sunday
    return (weekday + 1) % 7, days_in_month


def nearest_workday(day: int, first_weekday: int, days_in_month: int) -> int:
    """Shift ``day`` to the nearest Monday-Friday without leaving the month.

    Saturday moves back to Friday unless that falls before the 1st, in which
    case it moves forward to Monday. Sunday moves forward to Monday unless
    that falls after the last day, in which case it moves back to Friday.
    """
    weekday = (first_weekday + day - 1) % 7
    if weekday == 6:
        return day - 1 if day > 1 else day + 2
    if weekday == 0:
        return day + 1 if day < days_in_month else day - 2
    return day


# =============================================================================
# Resolution
# =============================================================================


def _resolve(
    year: int,
    month: int,
    day_of_month: DayOfMonthRule,
    day_of_week: DayOfWeekRule,
) -> tuple[int, ...]:
    """Concrete days of ``year``/``month`` matching both day rules.

    Returns:
        Sorted tuple of day numbers in ``1..days_in_month``; empty when no day
        of the month qualifies (e.g. ``0 0 30 2 *``).
    """
    first_weekday, days_in_month = _month_shape(year, month)

    if not day_of_month.restricted and not day_of_week.restricted:
        return tuple(range(1, days_in_month + 1))

    days: set[int] = set()

    if day_of_month.restricted:
        if day_of_month.last_day:
            days.add(days_in_month)
        if day_of_month.last_workday:
            days.add(nearest_workday(days_in_month, first_weekday, days_in_month))
        if day_of_month.last_nth_day:
            days.add(max(days_in_month - day_of_month.last_nth_day, 1))
        days.update(d for d in day_of_month.days if d <= days_in_month)
        days.update(
            nearest_workday(d, first_weekday, days_in_month)
            for d in day_of_month.workdays
            if d <= days_in_month
        )

    if day_of_week.restricted:
        # Distance from the 1st to the first Sunday of the month
        offset = (7 - first_weekday) % 7

        for weekday in day_of_week.days:
            days.update(range(1 + (offset + weekday) % 7, days_in_month + 1, 7))

        for encoded in day_of_week.nth_weekdays:
            day = 1 + 7 * (encoded // 7) + (offset + encoded) % 7
            if day <= days_in_month:
                days.add(day)

        # Anchor on the first day of the month's last seven days
        anchor = days_in_month - 6
        anchor_offset = (7 - (first_weekday + anchor - 1) % 7) % 7
        for weekday in day_of_week.last_weekdays:
            days.add(anchor + (anchor_offset + weekday) % 7)

    return tuple(sorted(days))


# Sized once at import from CRONNEXT_DAY_CACHE_SIZE alone
resolve_days = lru_cache(maxsize=day_cache_size_from_env())(_resolve)


def actual_days(year: int, month: int, expression: "CronExpression") -> tuple[int, ...]:
    """Concrete days of ``year``/``month`` on which ``expression`` fires."""
    return resolve_days(year, month, expression.day_of_month, expression.day_of_week)


def clear_day_cache() -> None:
    """Drop all memoised month resolutions."""
    resolve_days.cache_clear()
    logger.debug("Day-of-month cache cleared")
