"""Pydantic models for logstats."""

from logstats.models.config import RunConfig
from logstats.models.query import DateRange, SearchRequest
from logstats.models.report import Client, EndpointStats, Report, SearchResultEntry

__all__ = [
    "Client",
    "DateRange",
    "EndpointStats",
    "Report",
    "RunConfig",
    "SearchRequest",
    "SearchResultEntry",
]
