"""Next-occurrence resolution.

Finding the next instant of a schedule is a cascading carry over six
granularities, finest first::

    second -> minute -> hour -> day -> month -> year

Each step looks for the smallest candidate strictly greater than the current
value of its field. When one exists the field is set to it and every finer
field is reset to its first candidate; otherwise the step carries into the
next coarser one. The year step is terminal and yields ``None`` when the year
list is exhausted.

Construction of the resulting instant depends on how far the carry went:

- Second and minute steps stay inside the current hour and move by a fixed
  amount of absolute time.
- For an every-hour schedule the hour step also moves in absolute time,
  which keeps a repeated wall-clock hour (after a DST fall-back) reachable.
  A schedule with fixed hours, or a move that lands past a gap, rebuilds the
  instant from civil fields instead.
- Day, month and year steps always rebuild the instant from civil fields in
  the original time zone, so month lengths and DST offsets are taken from the
  calendar rather than from a duration.

Note that plain ``datetime + timedelta`` on aware datetimes is wall-clock
arithmetic in Python; absolute moves here go through UTC.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from datetime import datetime, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING

from cronnext.days import resolve_days

if TYPE_CHECKING:
    from cronnext.expression import CronExpression


logger = logging.getLogger(__name__)


# =============================================================================
# Time helpers
# =============================================================================


def shift(moment: datetime, delta: timedelta) -> datetime:
    """Move ``moment`` by ``delta`` of absolute (elapsed) time."""
    if moment.tzinfo is None:
        return moment + delta
    return (moment.astimezone(timezone.utc) + delta).astimezone(moment.tzinfo)


def civil(
    tz: tzinfo | None,
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
) -> datetime:
    """Build the instant for a wall-clock time in ``tz``.

    A wall time that does not exist (spring-forward gap) becomes the first
    real instant after the gap; an ambiguous one becomes its first occurrence.
    """
    wall = datetime(year, month, day, hour, minute, second)
    if tz is None:
        return wall

    moment = wall.replace(tzinfo=tz).astimezone(timezone.utc).astimezone(tz)

    # The gap swallowed the intended hour and the zone resolved backwards
    if moment.hour < hour and moment.date() == wall.date():
        moment = shift(moment, timedelta(hours=hour - moment.hour)).replace(microsecond=0)
    return moment


# =============================================================================
# Cascade
# =============================================================================


class _Cascade:
    """State of one resolution: the expression, the zone and the day list
    of the month currently being walked."""

    __slots__ = ("_expr", "_tz", "_days")

    def __init__(self, expr: "CronExpression", tz: tzinfo | None) -> None:
        self._expr = expr
        self._tz = tz
        self._days: tuple[int, ...] = ()

    def _month_days(self, year: int, month: int) -> tuple[int, ...]:
        return resolve_days(year, month, self._expr.day_of_month, self._expr.day_of_week)

    def start(self, moment: datetime) -> datetime | None:
        """Resolve from an arbitrary instant.

        ``moment`` does not have to be an instant of the schedule: the first
        field (from the coarsest) whose value is not a candidate decides which
        step to take.
        """
        expr = self._expr

        i = bisect_left(expr.years, moment.year)
        if i == len(expr.years):
            return None
        if expr.years[i] != moment.year:
            return self._next_year(moment)

        i = bisect_left(expr.months, moment.month)
        if i == len(expr.months):
            return self._next_year(moment)
        if expr.months[i] != moment.month:
            return self._next_month(moment)

        self._days = self._month_days(moment.year, moment.month)
        i = bisect_left(self._days, moment.day)
        if i == len(self._days):
            return self._next_month(moment)
        if self._days[i] != moment.day:
            return self._next_day(moment)

        i = bisect_left(expr.hours, moment.hour)
        if i == len(expr.hours):
            return self._next_day(moment)
        if expr.hours[i] != moment.hour:
            return self._next_hour(moment)

        i = bisect_left(expr.minutes, moment.minute)
        if i == len(expr.minutes):
            return self._next_hour(moment)
        if expr.minutes[i] != moment.minute:
            return self._next_minute(moment)

        i = bisect_left(expr.seconds, moment.second)
        if i == len(expr.seconds):
            return self._next_minute(moment)

        return self._next_second(moment)

    def _next_second(self, moment: datetime) -> datetime | None:
        seconds = self._expr.seconds
        i = bisect_right(seconds, moment.second)
        if i == len(seconds):
            return self._next_minute(moment)
        return shift(
            moment,
            timedelta(seconds=seconds[i] - moment.second, microseconds=-moment.microsecond),
        )

    def _next_minute(self, moment: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(expr.minutes, moment.minute)
        if i == len(expr.minutes):
            return self._next_hour(moment)
        return shift(
            moment,
            timedelta(
                minutes=expr.minutes[i] - moment.minute,
                seconds=expr.seconds[0] - moment.second,
                microseconds=-moment.microsecond,
            ),
        )

    def _next_hour(self, moment: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(expr.hours, moment.hour)
        if i == len(expr.hours):
            return self._next_day(moment)

        hour = expr.hours[i]
        # Only an every-hour schedule walks absolute time; fixed hours fire once
        if len(expr.hours) == 24:
            moved = shift(moment, timedelta(hours=hour - moment.hour))
            candidate = shift(
                moved,
                timedelta(
                    minutes=expr.minutes[0] - moved.minute,
                    seconds=expr.seconds[0] - moved.second,
                    microseconds=-moved.microsecond,
                ),
            )
            # A wall clock that went back lands on the repeated hour, also scheduled
            if candidate.date() == moment.date() and candidate.hour <= hour:
                return candidate

        return civil(
            self._tz, moment.year, moment.month, moment.day,
            hour, expr.minutes[0], expr.seconds[0],
        )

    def _next_day(self, moment: datetime) -> datetime | None:
        expr = self._expr
        i = bisect_right(self._days, moment.day)
        if i == len(self._days):
            return self._next_month(moment)
        return civil(
            self._tz, moment.year, moment.month, self._days[i],
            expr.hours[0], expr.minutes[0], expr.seconds[0],
        )

    def _next_month(self, moment: datetime) -> datetime | None:
        i = bisect_right(self._expr.months, moment.month)
        if i == len(self._expr.months):
            return self._next_year(moment)
        return self._first_from(moment.year, i)

    def _next_year(self, moment: datetime) -> datetime | None:
        years = self._expr.years
        i = bisect_right(years, moment.year)
        if i == len(years):
            return None
        return self._first_from(years[i], 0)

    def _first_from(self, year: int, month_index: int) -> datetime | None:
        """First instant of the first month, from ``months[month_index]`` of
        ``year`` onwards, that has at least one matching day."""
        expr = self._expr
        while True:
            for month in expr.months[month_index:]:
                days = self._month_days(year, month)
                if days:
                    self._days = days
                    return civil(
                        self._tz, year, month, days[0],
                        expr.hours[0], expr.minutes[0], expr.seconds[0],
                    )
                logger.debug("No matching day in %04d-%02d, skipping month", year, month)

            i = bisect_right(expr.years, year)
            if i == len(expr.years):
                return None
            year = expr.years[i]
            month_index = 0


def next_occurrence(expr: "CronExpression", after: datetime) -> datetime | None:
    """Next instant of ``expr`` strictly after ``after``.

    Args:
        expr: Parsed expression.
        after: Starting instant; aware datetimes resolve in their own zone,
            naive ones as floating wall-clock time.

    Returns:
        The next instant (same ``tzinfo`` as ``after``, microsecond 0), or
        None if the schedule has no further occurrence.
    """
    result = _Cascade(expr, after.tzinfo).start(after)
    if result is None:
        logger.debug("No occurrence of %r after %s", expr.expression, after.isoformat())
    return result
