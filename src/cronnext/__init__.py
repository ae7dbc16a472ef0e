"""cronnext - cron expression parser and next-occurrence resolver.

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * ? / , -
    Minute        0-59            * ? / , -
    Hour          0-23            * ? / , -
    Day of Month  1-31            * ? / , - L LW L-n nW
    Month         1-12 or JAN-DEC * ? / , -
    Day of Week   0-7 or SUN-SAT  * ? / , - nL n#w
    Year          1970-2099       * ? / , -

Special Characters:
    *   Any value (? is a synonym)
    ,   List separator (1,3,5)
    -   Range (1-5); reversed ranges wrap (FRI-MON)
    /   Step (*/15 = every 15)
    L   Last day of month; L-3 = three days before it; 5L = last Friday
    W   Nearest weekday (15W = nearest weekday to the 15th; LW = last weekday)
    #   Nth weekday (1#3 = third Monday)

When both day-of-month and day-of-week are restricted a day matches if
either one matches it.

Usage:
    >>> from datetime import datetime
    >>> from cronnext import CronExpression
    >>> expr = CronExpression.parse("0 9 * * MON-FRI")
    >>> expr.next(datetime(2024, 3, 8, 12, 0))
    datetime.datetime(2024, 3, 11, 9, 0)
    >>> [run.day for run in expr.iter(datetime(2024, 3, 8, 12, 0), limit=3)]
    [11, 12, 13]

Aware datetimes resolve in their own zone::

    from zoneinfo import ZoneInfo

    expr.next(datetime(2024, 3, 8, 12, 0, tzinfo=ZoneInfo("Europe/Paris")))
    expr.next_n(5)  # from now, in CRONNEXT_TIMEZONE
"""

from cronnext.days import DayOfMonthRule, DayOfWeekRule, actual_days
from cronnext.exceptions import ConfigError, CronParseError
from cronnext.expression import (
    CronExpression,
    CronParser,
    Occurrences,
    is_valid_expression,
    must_parse,
    parse,
    validate_expression,
)
from cronnext.fields import CronFieldType

__version__ = "0.1.0"

__all__ = [
    # Core
    "CronExpression",
    "CronFieldType",
    "DayOfMonthRule",
    "DayOfWeekRule",
    "Occurrences",
    # Parser
    "CronParser",
    "parse",
    "must_parse",
    # Errors
    "CronParseError",
    "ConfigError",
    # Days
    "actual_days",
    # Validation
    "validate_expression",
    "is_valid_expression",
]
