"""
Running statistics over the records of one log source.
"""

from collections import Counter
from datetime import datetime
from operator import itemgetter
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from access_log_stats.model import LogRecord


TOP_LIMIT = 3

PERCENTILE = 95


def top_frequent(mapping: Mapping[str, int], limit: int = TOP_LIMIT) -> List[Tuple[str, int]]:
    """
    Return the `limit` entries with the highest counts, highest first.

    The order of entries with equal counts is not defined.
    """
    return sorted(mapping.items(), key=itemgetter(1), reverse=True)[:limit]


class StatisticsReport(BaseModel):
    """
    Snapshot of the statistics collected from one log source.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="File or URL the records were read from")
    from_date_time: Optional[datetime] = Field(
        default=None, description="Records at or before this moment were skipped"
    )
    to_date_time: Optional[datetime] = Field(
        default=None, description="Records at or after this moment were skipped"
    )
    number_of_requests: int
    average_response_size: int
    response_size_percentile: int
    requested_resources: List[Tuple[str, int]]
    status_codes: List[Tuple[str, int]]
    remote_addresses: List[Tuple[str, int]]
    http_referers: List[Tuple[str, int]]


class LogStatistics:
    """
    Statistics accumulated record by record from a single source.

    Query methods are computed from the current state on every call.
    """

    def __init__(
        self,
        source: str,
        from_date_time: Optional[datetime] = None,
        to_date_time: Optional[datetime] = None,
    ):
        self.source = source
        self.from_date_time = from_date_time
        self.to_date_time = to_date_time

        self.number_of_requests = 0
        self.requested_resources: Counter = Counter()
        self.status_codes: Counter = Counter()
        self.remote_addresses: Counter = Counter()
        self.http_referers: Counter = Counter()

        # In arrival order; sorted on demand by the percentile
        self.response_sizes: List[int] = []

    def update(self, record: LogRecord) -> None:
        self.number_of_requests += 1
        self.requested_resources[record.request_target] += 1
        self.status_codes[record.http_status] += 1
        self.remote_addresses[record.remote_address] += 1
        self.http_referers[record.http_referer] += 1
        self.response_sizes.append(record.response_size)

    def most_requested_resources(self) -> List[Tuple[str, int]]:
        return top_frequent(self.requested_resources)

    def most_common_status_codes(self) -> List[Tuple[str, int]]:
        return top_frequent(self.status_codes)

    def most_frequent_remote_addresses(self) -> List[Tuple[str, int]]:
        return top_frequent(self.remote_addresses)

    def most_frequent_referers(self) -> List[Tuple[str, int]]:
        return top_frequent(self.http_referers)

    def average_response_size(self) -> int:
        """Mean response body size in bytes, rounded down. 0 if nothing was counted."""
        if self.number_of_requests == 0:
            return 0
        return sum(self.response_sizes) // self.number_of_requests

    def response_size_percentile(self) -> int:
        """
        95th percentile of the response body size.

        Computed as: skip = (n // 100) * 95, then skip += skip - 1 when
        skip is positive, and take the element after the skipped ones in
        ascending order, or 0 when nothing is left. Under 100 sizes the
        smallest one is returned. For n in 100..189 and n >= 200 the skip
        runs past the end and the result is 0; for n in 190..199 it is
        the 190th smallest size (sorted index 189).
        """
        skip = len(self.response_sizes) // 100 * PERCENTILE
        skip += skip - 1 if skip > 0 else 0
        sizes = sorted(self.response_sizes)
        if skip >= len(sizes):
            return 0
        return sizes[skip]

    def report(self) -> StatisticsReport:
        return StatisticsReport(
            source=self.source,
            from_date_time=self.from_date_time,
            to_date_time=self.to_date_time,
            number_of_requests=self.number_of_requests,
            average_response_size=self.average_response_size(),
            response_size_percentile=self.response_size_percentile(),
            requested_resources=self.most_requested_resources(),
            status_codes=self.most_common_status_codes(),
            remote_addresses=self.most_frequent_remote_addresses(),
            http_referers=self.most_frequent_referers(),
        )
