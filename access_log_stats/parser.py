"""
Parser for access log lines in the combined format.
Converts each line into a LogRecord or raises MalformedLine.
"""

import re
from datetime import datetime

from access_log_stats.model import (
    BODY_BYTES_SENT_PATTERN,
    HTTP_REFERER_PATTERN,
    HTTP_REQUEST_PATTERN,
    HTTP_STATUS_PATTERN,
    HTTP_USER_AGENT_PATTERN,
    LOG_DATE_FORMAT,
    REMOTE_ADDRESS_PATTERN,
    REMOTE_USER_PATTERN,
    LogRecord,
)


class MalformedLine(ValueError):
    """Raised when a line does not match the access log format."""

    def __init__(self, line: str):
        super().__init__(f"Line does not match the access log format: {line[:100]!r}")
        self.line = line


DATE_TIME_PATTERN = r"\d{2}/[A-Za-z]{3}/\d{4}:\d{2}:\d{2}:\d{2} [+-]\d{4}"

# Format: $remote_addr - $remote_user [$time_local] "$request" $status $body_bytes_sent "$http_referer" "$http_user_agent"
# The whole line must match, trailing content is rejected
LOG_LINE_PATTERN = re.compile(
    rf"(?P<remote_address>{REMOTE_ADDRESS_PATTERN})"
    r" - "
    rf"(?P<remote_user>{REMOTE_USER_PATTERN}) "
    rf"\[(?P<date_time>{DATE_TIME_PATTERN})\] "
    rf'"(?P<http_request>{HTTP_REQUEST_PATTERN})" '
    rf"(?P<http_status>{HTTP_STATUS_PATTERN}) "
    rf"(?P<body_bytes_sent>{BODY_BYTES_SENT_PATTERN}) "
    rf'"(?P<http_referer>{HTTP_REFERER_PATTERN})" '
    rf'"(?P<http_user_agent>{HTTP_USER_AGENT_PATTERN})"',
    re.ASCII,
)


def parse_timestamp(timestamp_str: str) -> datetime:
    """
    Parse access log timestamp format.

    Example: "17/May/2015:08:05:32 +0000"
    """
    return datetime.strptime(timestamp_str, LOG_DATE_FORMAT)


def parse_log_line(line: str) -> LogRecord:
    """
    Parse a single access log line into a LogRecord.

    The stored timestamp is normalized to ISO-8601 with its offset kept,
    e.g. "2015-05-17T08:05:32+00:00".

    Raises:
        MalformedLine: if the line does not match the format or the
            timestamp is not a valid date
    """
    line = line.rstrip("\r\n")

    match = LOG_LINE_PATTERN.fullmatch(line)
    if not match:
        raise MalformedLine(line)

    groups = match.groupdict()

    try:
        groups["date_time"] = parse_timestamp(groups["date_time"]).isoformat()
    except ValueError:
        raise MalformedLine(line) from None

    return LogRecord(**groups)
