"""Exceptions raised by cronnext."""

from __future__ import annotations


class CronParseError(ValueError):
    """Raised when cron expression parsing fails.

    Attributes:
        expression: The full expression being parsed.
        field: Name of the offending field (``"day-of-month"``, ...), or None
            for structural errors such as a wrong field count.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        field: str | None = None,
    ) -> None:
        self.expression = expression
        self.field = field
        super().__init__(message)


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
