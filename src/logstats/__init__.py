"""logstats - hourly and daily endpoint statistics from Elasticsearch logs."""

from logstats.compiler.query_builder import QueryBuilder
from logstats.executor.search_executor import SearchExecutor
from logstats.models import Report, RunConfig, SearchRequest, SearchResultEntry
from logstats.store import StatisticsStore

__all__ = [
    "QueryBuilder",
    "Report",
    "RunConfig",
    "SearchExecutor",
    "SearchRequest",
    "SearchResultEntry",
    "StatisticsStore",
]
