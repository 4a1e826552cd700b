"""Tests for the search query builder."""

from datetime import date, datetime, timedelta, timezone

from logstats.compiler.query_builder import (
    SENTINEL_END,
    SENTINEL_START,
    QueryBuilder,
    date_range_for,
)
from logstats.models.query import DateRange

RANGE = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 15))


class TestDateRange:
    def test_monthly_range(self):
        """Monthly runs go from the first of the month to today."""
        now = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)
        r = date_range_for(monthly=True, now=now)
        assert r.start == date(2024, 3, 1)
        assert r.end == date(2024, 3, 15)

    def test_monthly_range_first_day(self):
        now = datetime(2024, 2, 1, 0, 5, tzinfo=timezone.utc)
        r = date_range_for(monthly=True, now=now)
        assert r.start == r.end == date(2024, 2, 1)

    def test_monthly_range_uses_utc_date(self):
        """Just after midnight in Copenhagen is still the previous UTC day."""
        copenhagen = timezone(timedelta(hours=1))
        now = datetime(2024, 3, 1, 0, 30, tzinfo=copenhagen)
        r = date_range_for(monthly=True, now=now)
        assert r.start == date(2024, 2, 1)
        assert r.end == date(2024, 2, 29)

    def test_default_range_is_sentinel(self):
        r = date_range_for(monthly=False)
        assert r.start == SENTINEL_START == date(2000, 1, 1)
        assert r.end == SENTINEL_END == date(9999, 12, 31)


class TestQueryBuilder:
    def test_one_clause_per_filter_plus_range(self):
        """Each filter entry becomes exactly one match_phrase, plus one range."""
        builder = QueryBuilder()
        filters = {"app": "my_app", "level": "INFO", "env": "prod"}
        clauses = builder.build_filters(filters, RANGE)

        ranges = [c for c in clauses if "range" in c]
        phrases = [c for c in clauses if "match_phrase" in c]
        assert len(ranges) == 1
        assert len(phrases) == len(filters)
        assert len(clauses) == len(filters) + 1

    def test_range_clause(self):
        builder = QueryBuilder()
        clauses = builder.build_filters({}, RANGE)
        assert clauses == [
            {
                "range": {
                    "timestamp": {
                        "gte": "2024-03-01",
                        "lte": "2024-03-15",
                        "format": "strict_date_optional_time",
                    }
                }
            }
        ]

    def test_filters_in_order_after_range(self):
        builder = QueryBuilder()
        clauses = builder.build_filters({"app": "my_app", "level": "INFO"}, RANGE)
        assert clauses[1:] == [
            {"match_phrase": {"app": "my_app"}},
            {"match_phrase": {"level": "INFO"}},
        ]

    def test_aggregations(self):
        """hoursum and daysum are always attached, zero buckets included."""
        aggs = QueryBuilder().build_aggregations()

        assert set(aggs) == {"hoursum", "daysum"}
        assert aggs["hoursum"]["date_histogram"]["calendar_interval"] == "1h"
        assert aggs["daysum"]["date_histogram"]["calendar_interval"] == "1d"
        for agg in aggs.values():
            histogram = agg["date_histogram"]
            assert histogram["field"] == "timestamp"
            assert histogram["time_zone"] == "Europe/Copenhagen"
            assert histogram["min_doc_count"] == 0

    def test_custom_fields(self):
        builder = QueryBuilder(timestamp_field="@timestamp", time_zone="UTC", index="logs-*")
        base = builder.build_base({}, RANGE)

        assert "@timestamp" in base.filters[0]["range"]
        assert base.aggs["hoursum"]["date_histogram"]["time_zone"] == "UTC"
        assert base.index == "logs-*"

    def test_build_request_adds_client_and_endpoint(self):
        builder = QueryBuilder()
        base = builder.build_base({"app": "my_app"}, RANGE)
        request = builder.build_request(base, "client-a", "endpointName", "endp-1")

        assert request.filters[:-2] == base.filters
        assert request.filters[-2:] == (
            {"match_phrase": {"clientId": "client-a"}},
            {"match_phrase": {"endpointName": "endp-1"}},
        )
        assert request.aggs == base.aggs

    def test_build_request_leaves_base_alone(self):
        """Pairs never see each other's clauses."""
        builder = QueryBuilder()
        base = builder.build_base({"app": "my_app"}, RANGE)
        before = base.to_dict()

        first = builder.build_request(base, "client-a", "endpointName", "endp-1")
        second = builder.build_request(base, "client-b", "endpointName", "endp-2")

        assert base.to_dict() == before
        assert len(first.filters) == len(second.filters) == len(base.filters) + 2
        assert first.filters[-2:] != second.filters[-2:]
        assert first.filters[:-2] == second.filters[:-2]

    def test_client_field_configurable(self):
        builder = QueryBuilder(client_field="tenant")
        base = builder.build_base({}, RANGE)
        request = builder.build_request(base, "t1", "path", "/api")
        assert {"match_phrase": {"tenant": "t1"}} in request.filters
