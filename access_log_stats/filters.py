"""
Record filtering by time range and field value prefixes.
"""

from datetime import datetime
from typing import Mapping, Optional

from access_log_stats.fields import UnknownField, field_value
from access_log_stats.model import LogRecord


def matches_dates(
    record: LogRecord,
    from_date_time: Optional[datetime] = None,
    to_date_time: Optional[datetime] = None,
) -> bool:
    """
    Check that the record lies strictly between the bounds.

    A record exactly at a bound is rejected. Missing bounds are ignored.
    """
    timestamp = record.timestamp
    if from_date_time is not None and not timestamp > from_date_time:
        return False
    if to_date_time is not None and not timestamp < to_date_time:
        return False
    return True


def matches_field_values(record: LogRecord, conditions: Mapping[str, str]) -> bool:
    """
    Check that every named field starts with the required value.

    Raises:
        UnknownField: if a condition names a field the record doesn't have
    """
    for name, prefix in conditions.items():
        value = field_value(record, name)
        if value is None:
            raise UnknownField(name)
        if not value.startswith(prefix):
            return False
    return True


def accepts(
    record: LogRecord,
    from_date_time: Optional[datetime] = None,
    to_date_time: Optional[datetime] = None,
    conditions: Optional[Mapping[str, str]] = None,
) -> bool:
    return matches_dates(record, from_date_time, to_date_time) and matches_field_values(
        record, conditions or {}
    )
