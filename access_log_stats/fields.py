"""
Named access to LogRecord fields, used by the filter and the CLI.
"""

from enum import Enum
from operator import attrgetter
from typing import Callable, Dict, FrozenSet, Iterable, Optional

from access_log_stats.model import LogRecord


class UnknownField(ValueError):
    """Raised when a field name is not one of the LogRecord fields."""

    def __init__(self, name: str):
        super().__init__(
            f"Log doesn't contain field {name!r}. Valid fields: {', '.join(sorted(field_names()))}"
        )
        self.name = name


class LogField(str, Enum):
    REMOTE_ADDRESS = "remoteAddress"
    REMOTE_USER = "remoteUser"
    DATE_TIME = "dateTime"
    HTTP_REQUEST = "httpRequest"
    HTTP_STATUS = "httpStatus"
    BODY_BYTES_SENT = "bodyBytesSent"
    HTTP_REFERER = "httpReferer"
    HTTP_USER_AGENT = "httpUserAgent"


_ACCESSORS: Dict[LogField, Callable[[LogRecord], str]] = {
    LogField.REMOTE_ADDRESS: attrgetter("remote_address"),
    LogField.REMOTE_USER: attrgetter("remote_user"),
    LogField.DATE_TIME: attrgetter("date_time"),
    LogField.HTTP_REQUEST: attrgetter("http_request"),
    LogField.HTTP_STATUS: attrgetter("http_status"),
    LogField.BODY_BYTES_SENT: attrgetter("body_bytes_sent"),
    LogField.HTTP_REFERER: attrgetter("http_referer"),
    LogField.HTTP_USER_AGENT: attrgetter("http_user_agent"),
}

_FIELDS_BY_NAME: Dict[str, LogField] = {field.value: field for field in LogField}


def field_names() -> FrozenSet[str]:
    return frozenset(_FIELDS_BY_NAME)


def contains_field(name: str) -> bool:
    return name in _FIELDS_BY_NAME


def field_value(record: LogRecord, name: str) -> Optional[str]:
    """
    Return the value of the named field, or None if there is no such field.

    Names are case-sensitive: "httpStatus" is a field, "httpstatus" is not.
    """
    field = _FIELDS_BY_NAME.get(name)
    if field is None:
        return None
    return _ACCESSORS[field](record)


def validate_field_names(names: Iterable[str]) -> None:
    """Raise UnknownField for the first name that is not a LogRecord field."""
    for name in names:
        if not contains_field(name):
            raise UnknownField(name)
