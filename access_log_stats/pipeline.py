"""
Read log lines, parse and filter them, and fold them into LogStatistics.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from access_log_stats.filters import accepts
from access_log_stats.parser import parse_log_line
from access_log_stats.statistics import LogStatistics


def collect_statistics(
    lines: Iterable[str],
    source: str,
    from_date_time: Optional[datetime] = None,
    to_date_time: Optional[datetime] = None,
    conditions: Optional[Mapping[str, str]] = None,
) -> LogStatistics:
    """
    Collect statistics from the lines of one source.

    Empty lines are skipped; a line holding only spaces is malformed. The
    first malformed line aborts the whole source: MalformedLine is raised
    and no statistics are returned.

    Args:
        lines: Log lines, with or without trailing newlines
        source: Name of the file or URL, kept in the statistics
        from_date_time: Only records strictly after this moment are counted
        to_date_time: Only records strictly before this moment are counted
        conditions: Field name -> required value prefix

    Returns:
        LogStatistics over the accepted records
    """
    conditions = conditions or {}
    statistics = LogStatistics(source, from_date_time, to_date_time)

    iterator = iter(lines)
    try:
        for line in iterator:
            if not line.rstrip("\r\n"):
                continue

            record = parse_log_line(line)
            if accepts(record, from_date_time, to_date_time, conditions):
                statistics.update(record)
    finally:
        # Generators and file-like sources are released even on abort
        close = getattr(iterator, "close", None)
        if close is not None:
            close()

    return statistics


def statistics_from_file(
    filepath: Union[str, Path],
    from_date_time: Optional[datetime] = None,
    to_date_time: Optional[datetime] = None,
    conditions: Optional[Mapping[str, str]] = None,
) -> LogStatistics:
    """
    Collect statistics from a local access log file.

    Raises:
        FileNotFoundError: if the file doesn't exist
        MalformedLine: if any non-empty line is not a valid log line
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Log file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        return collect_statistics(f, str(filepath), from_date_time, to_date_time, conditions)


def find_log_files(directory: Union[str, Path], pattern: str = "*.log") -> List[Path]:
    """
    List the log files of a directory matching a glob pattern, sorted by path.

    Patterns may be recursive, e.g. "**/*.log".
    """
    directory = Path(directory)

    if not directory.is_dir():
        raise NotADirectoryError(f"Directory not found: {directory}")

    log_files = sorted(f for f in directory.glob(pattern) if f.is_file())

    if not log_files:
        raise ValueError(f"No log files matching pattern '{pattern}' found in {directory}")

    return log_files
