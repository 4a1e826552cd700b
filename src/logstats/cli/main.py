"""CLI for logstats."""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, NoReturn

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from typer.core import TyperCommand, TyperGroup

from logstats.compiler.query_builder import QueryBuilder, date_range_for
from logstats.executor.search_executor import format_timestamp
from logstats.models.config import DEFAULT_TIME_ZONE, DEFAULT_TIMESTAMP_FIELD, RunConfig
from logstats.output.writer import write_report
from logstats.parser.loader import load_client_ids, parse_endpoints, parse_filters
from logstats.store import StatisticsStore

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "fetch"

USAGE = """Create a json file with day and hours sums for last 30-ish days.
Option -m will only produce sums for the current month (normally used on the last day of each month)

Usage
 logstats [fetch] [options]
 logstats show-query -f [filter(s)] [-m]

Options:
 -h [ElasticSearch host] -f [filter(s)] -e [endpoint(s)] -c client-list -o output [json-file] -m

Example:
 logstats -h http://elk.dk -f '{"app": "my_app", "level": "INFO"}' -e '{"endpointName": ["endp-1", "endp-2"]}' -c clients.json -o myFile.json"""


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _usage(error: str | None = None) -> NoReturn:
    """Print the usage text, optionally preceded by an error, and exit with 1."""
    if error:
        console.print(
            f"\nError: {error}\n", style="red", markup=False, highlight=False, soft_wrap=True
        )
    console.print(USAGE, markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(1)


class UsageCommand(TyperCommand):
    """Command whose parse errors (unknown flag, missing value, bad choice) go through _usage."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _usage(e.format_message())


class DefaultCommandGroup(TyperGroup):
    """Group that runs fetch when called with bare flags or no arguments.

    keeps `logstats -h ... -f ...` working for callers that predate the
    subcommands.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        group_opts = {opt for param in self.get_params(ctx) for opt in param.opts}
        if not args or (args[0].startswith("-") and args[0] not in group_opts):
            args = [DEFAULT_COMMAND, *args]
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _usage(e.format_message())

    def resolve_command(self, ctx: click.Context, args: list[str]):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            _usage(e.format_message())


app = typer.Typer(
    name="logstats",
    help="logstats - hourly and daily endpoint statistics from Elasticsearch",
    cls=DefaultCommandGroup,
)


def _configure_logging(level: LogLevel) -> None:
    # logs go to stderr, stdout is kept for usage messages and show-query output
    logging.basicConfig(
        level=level.value,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command(cls=UsageCommand)
def fetch(
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", envvar="LOGSTATS_HOST", help="Elasticsearch host URL"),
    ] = None,
    filters: Annotated[
        str | None, typer.Option("--filter", "-f", help="JSON object: field -> value")
    ] = None,
    endpoints: Annotated[
        str | None,
        typer.Option("--endpoint", "-e", help="JSON object: field -> list of endpoints"),
    ] = None,
    client_file: Annotated[
        Path | None, typer.Option("--client-file", "-c", help="JSON client list")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output JSON file")
    ] = None,
    monthly: Annotated[
        bool, typer.Option("--monthly", "-m", help="Only the current month")
    ] = False,
    index: Annotated[
        str | None, typer.Option("--index", help="Index pattern to search (default: all)")
    ] = None,
    time_zone: Annotated[
        str, typer.Option("--time-zone", help="Time zone for the histograms")
    ] = DEFAULT_TIME_ZONE,
    timestamp_field: Annotated[
        str, typer.Option("--timestamp-field", help="Timestamp field name")
    ] = DEFAULT_TIMESTAMP_FIELD,
    log_level: Annotated[
        LogLevel, typer.Option("--log-level", help="Logging level")
    ] = LogLevel.INFO,
) -> None:
    """Fetch hourly and daily sums per client and endpoint into a JSON file."""
    if not host:
        _usage("missing host")
    if not output:
        _usage("missing fileinfo")
    if not filters:
        _usage("missing filter(s)")
    if not client_file:
        _usage("missing json client-list")
    if not endpoints:
        _usage("missing endpoint(s)")

    try:
        parsed_filters = parse_filters(filters)
        parsed_endpoints = parse_endpoints(endpoints)
    except ValueError as e:
        _usage(str(e))

    _configure_logging(log_level)
    now = datetime.now(timezone.utc)
    logger.info("Start at %s", format_timestamp(now))

    try:
        client_ids = load_client_ids(client_file)
    except (OSError, ValueError) as e:
        logger.debug("client list failed: %s", e)
        _usage(f"Cannot read {client_file}")

    config = RunConfig(
        host=host,
        filters=parsed_filters,
        endpoints=parsed_endpoints,
        output=output,
        monthly=monthly,
        index=index,
        time_zone=time_zone,
        timestamp_field=timestamp_field,
        client_ids=client_ids,
    )

    # search errors are not caught - a failed run must not leave a report behind
    with StatisticsStore(config, now=now) as store:
        report = store.build_report()

    try:
        write_report(report, config.output)
    except OSError as e:
        logger.debug("write failed: %s", e)
        _usage(f"Cannot write {config.output}")

    logger.info("Exit at %s", format_timestamp(datetime.now(timezone.utc)))


@app.command("show-query", cls=UsageCommand)
def show_query(
    filters: Annotated[
        str | None, typer.Option("--filter", "-f", help="JSON object: field -> value")
    ] = None,
    monthly: Annotated[
        bool, typer.Option("--monthly", "-m", help="Only the current month")
    ] = False,
    index: Annotated[
        str | None, typer.Option("--index", help="Index pattern to search (default: all)")
    ] = None,
    time_zone: Annotated[
        str, typer.Option("--time-zone", help="Time zone for the histograms")
    ] = DEFAULT_TIME_ZONE,
    timestamp_field: Annotated[
        str, typer.Option("--timestamp-field", help="Timestamp field name")
    ] = DEFAULT_TIMESTAMP_FIELD,
) -> None:
    """Show the base search without sending it."""
    if not filters:
        _usage("missing filter(s)")

    try:
        parsed_filters = parse_filters(filters)
    except ValueError as e:
        _usage(str(e))

    builder = QueryBuilder(timestamp_field=timestamp_field, time_zone=time_zone, index=index)
    request = builder.build_base(parsed_filters, date_range_for(monthly))

    syntax = Syntax(json.dumps(request.to_dict(), indent=2), "json", theme="monokai")
    console.print(syntax)


if __name__ == "__main__":
    app()
