from datetime import datetime, timedelta, timezone

import pytest

from access_log_stats.fields import UnknownField
from access_log_stats.filters import accepts, matches_dates, matches_field_values
from access_log_stats.parser import parse_log_line


RECORD_TIME = datetime(2015, 5, 17, 8, 5, 32, tzinfo=timezone.utc)


@pytest.fixture
def record():
    return parse_log_line(
        '93.180.71.3 - - [17/May/2015:08:05:32 +0000] "GET /downloads/product_1 HTTP/1.1" 304 0 "-" "Debian APT-HTTP/1.3"'
    )


def test_no_bounds_no_conditions(record):
    assert accepts(record)
    assert accepts(record, None, None, {})


@pytest.mark.parametrize(
    "from_date_time, to_date_time, expected",
    [
        (RECORD_TIME - timedelta(seconds=1), None, True),
        (None, RECORD_TIME + timedelta(seconds=1), True),
        (RECORD_TIME - timedelta(days=1), RECORD_TIME + timedelta(days=1), True),
        (RECORD_TIME, None, False),
        (None, RECORD_TIME, False),
        (RECORD_TIME + timedelta(seconds=1), None, False),
        (None, RECORD_TIME - timedelta(seconds=1), False),
    ],
)
def test_time_bounds_are_exclusive(record, from_date_time, to_date_time, expected):
    assert matches_dates(record, from_date_time, to_date_time) is expected
    assert accepts(record, from_date_time, to_date_time) is expected


def test_bounds_in_another_offset(record):
    moscow = timezone(timedelta(hours=3))
    same_moment = datetime(2015, 5, 17, 11, 5, 32, tzinfo=moscow)

    assert not matches_dates(record, from_date_time=same_moment)
    assert matches_dates(record, from_date_time=same_moment - timedelta(minutes=1))


@pytest.mark.parametrize(
    "conditions, expected",
    [
        ({"httpStatus": "304"}, True),
        ({"httpStatus": "3"}, True),
        ({"httpStatus": ""}, True),
        ({"httpStatus": "4"}, False),
        ({"httpStatus": "04"}, False),
        ({"httpRequest": "GET /downloads"}, True),
        ({"httpRequest": "/downloads"}, False),
        ({"remoteAddress": "93.180", "httpUserAgent": "Debian"}, True),
        ({"remoteAddress": "93.180", "httpUserAgent": "Mozilla"}, False),
    ],
)
def test_field_prefix_conditions(record, conditions, expected):
    assert matches_field_values(record, conditions) is expected
    assert accepts(record, conditions=conditions) is expected


def test_unknown_field_fails_loudly(record):
    with pytest.raises(UnknownField):
        accepts(record, conditions={"status": "304"})


def test_time_and_fields_combined(record):
    after = RECORD_TIME - timedelta(hours=1)

    assert accepts(record, after, None, {"httpStatus": "30"})
    assert not accepts(record, after, None, {"httpStatus": "20"})
    assert not accepts(record, RECORD_TIME, None, {"httpStatus": "30"})
