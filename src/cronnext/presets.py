"""Named cron expressions.

Usage::

    from cronnext.presets import LAST_WORKDAY, get_preset

    LAST_WORKDAY.next()
    get_preset("first-monday").next_n(3)
"""

from cronnext.expression import CronExpression, must_parse


# =============================================================================
# Standard Intervals
# =============================================================================

# Same schedules as the @-aliases
YEARLY = must_parse("@yearly")
MONTHLY = must_parse("@monthly")
WEEKLY = must_parse("@weekly")
DAILY = must_parse("@daily")
HOURLY = must_parse("@hourly")
EVERY_MINUTE = must_parse("@every_minute")
EVERY_SECOND = must_parse("@every_second")

EVERY_5_MIN = must_parse("*/5 * * * *")
EVERY_15_MIN = must_parse("*/15 * * * *")
EVERY_30_MIN = must_parse("0,30 * * * *")
TWICE_DAILY = must_parse("0 0,12 * * *")


# =============================================================================
# Weekday Presets
# =============================================================================

WEEKDAYS_9AM = must_parse("0 9 * * MON-FRI")
BUSINESS_HOURS_HOURLY = must_parse("0 9-17 * * MON-FRI")
WEEKENDS_NOON = must_parse("0 12 * * SAT,SUN")

# Wraps around the end of the week: Friday, Saturday, Sunday, Monday
LONG_WEEKEND_8AM = must_parse("0 8 * * FRI-MON")


# =============================================================================
# Month Boundary Presets
# =============================================================================

FIRST_OF_MONTH = must_parse("0 6 1 * *")
LAST_OF_MONTH = must_parse("0 6 L * *")

# Nearest weekday to the 15th
MID_MONTH_WORKDAY = must_parse("0 9 15W * *")

LAST_WORKDAY = must_parse("0 18 LW * *")
THIRD_LAST_DAY = must_parse("0 6 L-2 * *")
FIRST_MONDAY = must_parse("0 9 * * MON#1")
LAST_FRIDAY = must_parse("0 17 * * FRIL")


# =============================================================================
# Quarter Presets
# =============================================================================

QUARTERLY = must_parse("0 0 1 JAN,APR,JUL,OCT *")
END_OF_QUARTER = must_parse("0 0 L MAR,JUN,SEP,DEC *")


# =============================================================================
# Preset Registry
# =============================================================================

PRESETS: dict[str, CronExpression] = {
    # Standard
    "yearly": YEARLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "every_second": EVERY_SECOND,
    "every_5_min": EVERY_5_MIN,
    "every_15_min": EVERY_15_MIN,
    "every_30_min": EVERY_30_MIN,
    "twice_daily": TWICE_DAILY,
    # Weekdays
    "weekdays_9am": WEEKDAYS_9AM,
    "business_hours_hourly": BUSINESS_HOURS_HOURLY,
    "weekends_noon": WEEKENDS_NOON,
    "long_weekend_8am": LONG_WEEKEND_8AM,
    # Month boundaries
    "first_of_month": FIRST_OF_MONTH,
    "last_of_month": LAST_OF_MONTH,
    "mid_month_workday": MID_MONTH_WORKDAY,
    "last_workday": LAST_WORKDAY,
    "third_last_day": THIRD_LAST_DAY,
    "first_monday": FIRST_MONDAY,
    "last_friday": LAST_FRIDAY,
    # Quarter
    "quarterly": QUARTERLY,
    "end_of_quarter": END_OF_QUARTER,
}


def get_preset(name: str) -> CronExpression | None:
    """Get a preset cron expression by name.

    Args:
        name: Preset name (case-insensitive, ``-`` and ``_`` interchangeable).

    Returns:
        CronExpression or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS)
