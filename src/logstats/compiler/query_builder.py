"""Builds elasticsearch aggregation searches for logstats.

the shape is fixed: a bool filter with a timestamp range and one match_phrase
per filter entry, plus two date histograms (hourly and daily). per-pair
requests are derived from the base one by adding the client and endpoint
clauses.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

from logstats.models.config import (
    DEFAULT_CLIENT_FIELD,
    DEFAULT_TIME_ZONE,
    DEFAULT_TIMESTAMP_FIELD,
    RunConfig,
)
from logstats.models.query import DateRange, SearchRequest

logger = logging.getLogger(__name__)

# "all time" - the non-monthly run has always used these bounds
SENTINEL_START = date(2000, 1, 1)
SENTINEL_END = date(9999, 12, 31)

# aggregation name -> calendar interval
HISTOGRAMS = {
    "hoursum": "1h",
    "daysum": "1d",
}


def date_range_for(monthly: bool, now: datetime | None = None) -> DateRange:
    """Pick the date range for a run.

    monthly runs cover the first of the current month up to today. dates are
    taken in UTC, same as the timestamps in the report.
    """
    if not monthly:
        return DateRange(start=SENTINEL_START, end=SENTINEL_END)

    today = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date()
    return DateRange(start=today.replace(day=1), end=today)


class QueryBuilder:
    """Builds the base search and the per (client, endpoint) searches.

    stateless apart from the field names and time zone it was created with.
    """

    def __init__(
        self,
        timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
        time_zone: str = DEFAULT_TIME_ZONE,
        client_field: str = DEFAULT_CLIENT_FIELD,
        index: str | None = None,
    ) -> None:
        self.timestamp_field = timestamp_field
        self.time_zone = time_zone
        self.client_field = client_field
        self.index = index

    @classmethod
    def from_config(cls, config: RunConfig) -> "QueryBuilder":
        return cls(
            timestamp_field=config.timestamp_field,
            time_zone=config.time_zone,
            client_field=config.client_field,
            index=config.index,
        )

    def build_base(self, filters: dict[str, Any], date_range: DateRange) -> SearchRequest:
        """Build the search shared by every pair: range + filters + histograms."""
        return SearchRequest(
            filters=tuple(self.build_filters(filters, date_range)),
            aggs=self.build_aggregations(),
            index=self.index,
        )

    def build_filters(
        self, filters: dict[str, Any], date_range: DateRange
    ) -> list[dict[str, Any]]:
        """Range clause first, then one match_phrase per filter, in filter order."""
        clauses: list[dict[str, Any]] = [
            {
                "range": {
                    self.timestamp_field: {
                        "gte": date_range.start.isoformat(),
                        "lte": date_range.end.isoformat(),
                        "format": "strict_date_optional_time",
                    }
                }
            }
        ]
        for field, value in filters.items():
            clauses.append({"match_phrase": {field: value}})
        return clauses

    def build_aggregations(self) -> dict[str, dict[str, Any]]:
        # min_doc_count 0 so empty hours/days show up as zero instead of a gap
        return {
            name: {
                "date_histogram": {
                    "field": self.timestamp_field,
                    "calendar_interval": interval,
                    "time_zone": self.time_zone,
                    "min_doc_count": 0,
                }
            }
            for name, interval in HISTOGRAMS.items()
        }

    def build_request(
        self, base: SearchRequest, client_id: str, field: str, endpoint: str
    ) -> SearchRequest:
        """Derive the search for one (client, endpoint) pair from the base search.

        returns a new request; base is left as it was so the next pair starts
        from the same clauses.
        """
        filters = base.filters + (
            {"match_phrase": {self.client_field: client_id}},
            {"match_phrase": {field: endpoint}},
        )
        return base.model_copy(update={"filters": filters})
