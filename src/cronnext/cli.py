"""Command-line interface for cronnext."""

import json
from datetime import datetime, tzinfo
from typing import Annotated, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer

from cronnext.config import get_config
from cronnext.exceptions import ConfigError, CronParseError
from cronnext.expression import CronExpression
from cronnext.logging import configure_logging
from cronnext.presets import PRESETS

app = typer.Typer(
    name="cronnext",
    help="Parse cron expressions and compute their next occurrences",
    add_completion=False,
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """Parse cron expressions and compute their next occurrences."""
    try:
        level = "DEBUG" if verbose else get_config().log_level
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    configure_logging(level)


def _zone(name: Optional[str]) -> Optional[tzinfo]:
    if name is None:
        return get_config().tzinfo()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown time zone: {name}") from None


def _start(start: Optional[str], tz_name: Optional[str]) -> datetime:
    tz = _zone(tz_name)
    if start is None:
        return datetime.now(tz)
    try:
        moment = datetime.fromisoformat(start)
    except ValueError:
        raise typer.BadParameter(f"not an ISO 8601 date-time: {start}", param_hint="--from")
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    if tz is not None:
        return moment.astimezone(tz)
    return moment


@app.command(name="next")
def next_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression, e.g. '0 9 * * MON-FRI'")],
    start: Annotated[
        Optional[str],
        typer.Option("--from", "-f", help="ISO 8601 instant to search after (default: now)"),
    ] = None,
    tz: Annotated[
        Optional[str],
        typer.Option("--tz", help="IANA time zone (default: CRONNEXT_TIMEZONE)"),
    ] = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=1, help="Number of occurrences to print"),
    ] = 1,
    format: Annotated[
        str,
        typer.Option("--format", help="Output format (text, json)"),
    ] = "text",
) -> None:
    """Print the next occurrences of a cron expression."""
    if format not in ("text", "json"):
        typer.echo(f"Error: Unknown format: {format}", err=True)
        raise typer.Exit(1)

    try:
        expr = CronExpression.parse(expression)
        after = _start(start, tz)
    except (CronParseError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    occurrences = [dt.isoformat() for dt in expr.next_n(count, after)]

    if format == "json":
        typer.echo(json.dumps({
            "expression": expr.expression,
            "after": after.isoformat(),
            "next": occurrences[0] if occurrences else None,
            "occurrences": occurrences,
        }, indent=2))
    elif occurrences:
        for occurrence in occurrences:
            typer.echo(occurrence)
    else:
        typer.echo("no further occurrence")


@app.command(name="validate")
def validate_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression to check")],
) -> None:
    """Check that a cron expression parses."""
    try:
        CronExpression.parse(expression)
    except CronParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo("valid")


@app.command(name="presets")
def presets_cmd() -> None:
    """List the named preset expressions."""
    width = max(len(name) for name in PRESETS)
    for name, expr in PRESETS.items():
        typer.echo(f"{name:<{width}}  {expr.expression}")


if __name__ == "__main__":
    app()
