"""Textual tokens accepted by the month and day-of-week fields.

Tokens are matched after lower-casing the field entry, so ``JAN``, ``Jan`` and
``jan`` all resolve through the same key.
"""

from __future__ import annotations


MONTH_TOKENS: dict[str, int] = {
    "1": 1, "01": 1, "jan": 1, "january": 1,
    "2": 2, "02": 2, "feb": 2, "february": 2,
    "3": 3, "03": 3, "mar": 3, "march": 3,
    "4": 4, "04": 4, "apr": 4, "april": 4,
    "5": 5, "05": 5, "may": 5,
    "6": 6, "06": 6, "jun": 6, "june": 6,
    "7": 7, "07": 7, "jul": 7, "july": 7,
    "8": 8, "08": 8, "aug": 8, "august": 8,
    "9": 9, "09": 9, "sep": 9, "september": 9,
    "10": 10, "oct": 10, "october": 10,
    "11": 11, "nov": 11, "november": 11,
    "12": 12, "dec": 12, "december": 12,
}

# 0 = Sunday. 7 is accepted as a second spelling of Sunday.
DAY_OF_WEEK_TOKENS: dict[str, int] = {
    "0": 0, "00": 0, "sun": 0, "sunday": 0,
    "1": 1, "01": 1, "mon": 1, "monday": 1,
    "2": 2, "02": 2, "tue": 2, "tuesday": 2,
    "3": 3, "03": 3, "wed": 3, "wednesday": 3,
    "4": 4, "04": 4, "thu": 4, "thursday": 4,
    "5": 5, "05": 5, "fri": 5, "friday": 5,
    "6": 6, "06": 6, "sat": 6, "saturday": 6,
    "7": 0, "07": 0,
}

MONTH_NAMES: tuple[str, ...] = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
    "january", "february", "march", "april", "june",
    "july", "august", "september", "october", "november", "december",
)

DAY_OF_WEEK_NAMES: tuple[str, ...] = (
    "sun", "mon", "tue", "wed", "thu", "fri", "sat",
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
)
