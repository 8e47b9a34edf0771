"""
Pydantic model for a single parsed access log line.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Format used by the server when writing $time_local
LOG_DATE_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

# Four octets 0-255; the separating dot is optional so that the word
# boundary decides where the address ends
IPV4_PATTERN = r"(?:(?:(?:|[1-9]|1\d|2[0-4])\d|25[0-5])\.?\b){4}"

# 1-8 groups of up to 4 hex digits; only the token shape is checked
IPV6_PATTERN = r"(?:(?:^|:)[0-9a-fA-F]{0,4}){1,8}"

REMOTE_ADDRESS_PATTERN = rf"{IPV4_PATTERN}|{IPV6_PATTERN}"

REMOTE_USER_PATTERN = r"\S*"

HTTP_REQUEST_PATTERN = (
    r"(?:GET|POST|PUT|DELETE|HEAD|OPTIONS|PATCH)"  # Methods are case-sensitive
    r" /[^ ]*"  # Target, no spaces allowed
    r" HTTP/(?:1\.[01]|2\.0)"
)

HTTP_STATUS_PATTERN = r"[1-5]\d{2}"

BODY_BYTES_SENT_PATTERN = r"\d+"

HTTP_REFERER_PATTERN = r'[^"]*'

HTTP_USER_AGENT_PATTERN = r'[^"]+'


def whole_value(pattern: str) -> str:
    """Anchor a line sub-pattern so that it must match a whole field value."""
    return rf"(?a)\A(?:{pattern})\Z"


class LogRecord(BaseModel):
    """
    Represents a single entry of the access log.

    Format:
    $remote_addr - $remote_user [$time_local] "$request" $status $body_bytes_sent "$http_referer" "$http_user_agent"

    Every field is kept as text and must match its part of the line format.
    Aliases are the field names accepted by the filter (``remoteAddress``,
    ``httpStatus``, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        regex_engine="python-re",
        json_schema_extra={
            "example": {
                "remoteAddress": "93.180.71.3",
                "remoteUser": "-",
                "dateTime": "2015-05-17T08:05:32+00:00",
                "httpRequest": "GET /downloads/product_1 HTTP/1.1",
                "httpStatus": "304",
                "bodyBytesSent": "0",
                "httpReferer": "-",
                "httpUserAgent": "Debian APT-HTTP/1.3 (0.8.16~exp12ubuntu10.21)",
            }
        },
    )

    remote_address: str = Field(
        alias="remoteAddress",
        pattern=whole_value(REMOTE_ADDRESS_PATTERN),
        description="IPv4 or IPv6 address of the client making the request",
    )

    remote_user: str = Field(
        alias="remoteUser",
        pattern=whole_value(REMOTE_USER_PATTERN),
        description="Authenticated username ('-' if not authenticated)",
    )

    date_time: str = Field(
        alias="dateTime",
        description="ISO-8601 timestamp of the request, original UTC offset preserved",
    )

    http_request: str = Field(
        alias="httpRequest",
        pattern=whole_value(HTTP_REQUEST_PATTERN),
        description="Request line as sent by the client (e.g. 'GET /index.html HTTP/1.1')",
    )

    http_status: str = Field(
        alias="httpStatus",
        pattern=whole_value(HTTP_STATUS_PATTERN),
        description="HTTP status code returned by the server (e.g. '200', '404')",
    )

    body_bytes_sent: str = Field(
        alias="bodyBytesSent",
        pattern=whole_value(BODY_BYTES_SENT_PATTERN),
        description="Size of the response body in bytes, any number of digits",
    )

    http_referer: str = Field(
        alias="httpReferer",
        pattern=whole_value(HTTP_REFERER_PATTERN),
        description="URL of the referring page ('-' if not available)",
    )

    http_user_agent: str = Field(
        alias="httpUserAgent",
        pattern=whole_value(HTTP_USER_AGENT_PATTERN),
        description="User agent string identifying the client software",
    )

    @field_validator("date_time")
    @classmethod
    def check_date_time(cls, value: str) -> str:
        """Require an ISO-8601 timestamp with a UTC offset."""
        if datetime.fromisoformat(value).tzinfo is None:
            raise ValueError(f"Timestamp has no UTC offset: {value!r}")
        return value

    @property
    def request_target(self) -> str:
        """Path requested by the client, e.g. '/downloads/product_1'."""
        return self.http_request.split(" ")[1]

    @property
    def timestamp(self) -> datetime:
        return datetime.fromisoformat(self.date_time)

    @property
    def response_size(self) -> int:
        return int(self.body_bytes_sent)

    def to_line(self) -> str:
        """
        Render the record back into the access log format.

        Parsing the result with ``parse_log_line`` gives an equal record.
        """
        return (
            f'{self.remote_address} - {self.remote_user} '
            f'[{self.timestamp.strftime(LOG_DATE_FORMAT)}] '
            f'"{self.http_request}" {self.http_status} {self.body_bytes_sent} '
            f'"{self.http_referer}" "{self.http_user_agent}"'
        )
