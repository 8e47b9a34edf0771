#!/usr/bin/env python3

"""
CLI tool to collect statistics from access log files.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click
from pydantic import TypeAdapter

from access_log_stats.fields import UnknownField, field_names, validate_field_names
from access_log_stats.pipeline import find_log_files, statistics_from_file
from access_log_stats.statistics import StatisticsReport


def parse_date_time(ctx, param, value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 --from/--to value; an explicit UTC offset is required."""
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date or date format: {value!r}")
    if parsed.tzinfo is None:
        raise click.BadParameter(f"Date must include a UTC offset, e.g. +00:00: {value!r}")
    return parsed


def build_conditions(filter_fields: Tuple[str, ...], filter_values: Tuple[str, ...]) -> Dict[str, str]:
    """Pair --filter-field and --filter-value options in the order they were given."""
    if len(filter_fields) != len(filter_values):
        raise click.UsageError(
            "Number of --filter-field options doesn't correspond to number of --filter-value options"
        )
    try:
        validate_field_names(filter_fields)
    except UnknownField as e:
        raise click.BadParameter(str(e), param_hint="'--filter-field'")
    return dict(zip(filter_fields, filter_values))


def filter_options(command):
    """Options shared by all commands that select records."""
    options = [
        click.option(
            "--from",
            "from_date_time",
            callback=parse_date_time,
            help="Only count records after this ISO-8601 date, e.g. 2015-05-17T08:00:00+00:00",
        ),
        click.option(
            "--to",
            "to_date_time",
            callback=parse_date_time,
            help="Only count records before this ISO-8601 date",
        ),
        click.option(
            "--filter-field",
            "filter_fields",
            multiple=True,
            help=f"Field to filter by, one of: {', '.join(sorted(field_names()))}. "
            "Can specify multiple times, paired with --filter-value.",
        ),
        click.option(
            "--filter-value",
            "filter_values",
            multiple=True,
            help="Required prefix of the matching --filter-field value.",
        ),
        click.option(
            "--output",
            "-o",
            type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
            default=None,
            help="Write the reports as a JSON array to this file. Default: print to stdout",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def analyze_files(
    log_files: List[Path],
    from_date_time: Optional[datetime],
    to_date_time: Optional[datetime],
    conditions: Dict[str, str],
    output: Optional[Path],
) -> None:
    """Collect statistics for every file separately and emit the reports."""
    reports: List[StatisticsReport] = []
    failed_files = []

    for log_file in log_files:
        try:
            statistics = statistics_from_file(log_file, from_date_time, to_date_time, conditions)
        except ValueError as e:
            # MalformedLine: the whole file is discarded
            click.echo(click.style(f"⊘ Skipped {log_file}: {e}", fg="yellow"), err=True)
            failed_files.append(log_file)
            continue
        except OSError as e:
            click.echo(click.style(f"✗ Error reading {log_file}: {e}", fg="red"), err=True)
            failed_files.append(log_file)
            continue

        click.echo(f"✓ Analyzed {log_file}: {statistics.number_of_requests} requests", err=True)
        reports.append(statistics.report())

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(TypeAdapter(List[StatisticsReport]).dump_json(reports, indent=2))
        click.echo(click.style(f"✓ Wrote {len(reports)} reports to {output}", fg="green"), err=True)
    else:
        for report in reports:
            click.echo(report.model_dump_json(indent=2))

    if failed_files:
        click.echo(
            click.style(f"Warning: {len(failed_files)} of {len(log_files)} files were skipped", fg="red"),
            err=True,
        )
        sys.exit(1)


@click.group()
def cli():
    """CLI tool for collecting statistics from access log files."""
    pass


@cli.command()
@click.argument(
    "log_files",
    nargs=-1,
    required=True,
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
)
@filter_options
def single(
    log_files: Tuple[Path, ...],
    from_date_time: Optional[datetime],
    to_date_time: Optional[datetime],
    filter_fields: Tuple[str, ...],
    filter_values: Tuple[str, ...],
    output: Optional[Path],
):
    """
    Collect statistics from one or more access log files.

    Example:
        python analyze_access_log.py single logs/access.log --filter-field httpStatus --filter-value 5
    """
    conditions = build_conditions(filter_fields, filter_values)
    analyze_files(list(log_files), from_date_time, to_date_time, conditions, output)


@cli.command()
@click.argument(
    "log_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--pattern",
    type=str,
    default="*.log",
    help="Glob pattern for matching log files. Default: *.log",
)
@filter_options
def batch(
    log_dir: Path,
    pattern: str,
    from_date_time: Optional[datetime],
    to_date_time: Optional[datetime],
    filter_fields: Tuple[str, ...],
    filter_values: Tuple[str, ...],
    output: Optional[Path],
):
    """
    Collect statistics from every access log file of a directory, one report per file.

    Example:
        python analyze_access_log.py batch logs/ --pattern "**/*.log" --from 2015-05-17T00:00:00+00:00
    """
    conditions = build_conditions(filter_fields, filter_values)

    try:
        log_files = find_log_files(log_dir, pattern=pattern)
    except (NotADirectoryError, ValueError) as e:
        click.echo(click.style(f"✗ Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Found {len(log_files)} files in {log_dir} matching {pattern}", err=True)
    analyze_files(log_files, from_date_time, to_date_time, conditions, output)


if __name__ == "__main__":
    cli()
