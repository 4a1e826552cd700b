"""Main StatisticsStore interface for logstats."""

import json
import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import NamedTuple

from logstats.compiler.query_builder import QueryBuilder, date_range_for
from logstats.executor.search_executor import SearchExecutor, format_timestamp
from logstats.models.config import RunConfig
from logstats.models.query import SearchRequest
from logstats.models.report import EndpointStats, Report

logger = logging.getLogger(__name__)


class SearchTask(NamedTuple):
    """One (client, endpoint) pair to fetch stats for."""

    client_id: str
    field: str
    endpoint: str


class StatisticsStore:
    """Main interface for logstats.

    ties the builder and executor together for one run. pairs are
    searched strictly one after another; the report only exists in memory
    until every search has come back.
    """

    def __init__(
        self,
        config: RunConfig,
        executor: SearchExecutor | None = None,
        now: datetime | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Settings for this run, client ids included.
            executor: Search executor, defaults to one talking to config.host.
            now: Run start time. Fixes both the monthly range and "created".
        """
        self.config = config
        self.now = now or datetime.now(timezone.utc)
        self.builder = QueryBuilder.from_config(config)
        self.executor = executor or SearchExecutor(config.host)

    def base_request(self) -> SearchRequest:
        """The search every pair starts from."""
        date_range = date_range_for(self.config.monthly, self.now)
        return self.builder.build_base(self.config.filters, date_range)

    def tasks(self) -> Iterator[SearchTask]:
        """Clients in file order, then endpoints in the order they were given."""
        for client_id in self.config.client_ids:
            for field, endpoints in self.config.endpoints.items():
                for endpoint in endpoints:
                    yield SearchTask(client_id, field, endpoint)

    def collect(self) -> dict[str, dict[str, EndpointStats]]:
        """Run one search per task and gather the results by client and endpoint."""
        base = self.base_request()
        logger.debug("Search: %s", json.dumps(base.to_dict(), indent=2))

        results: dict[str, dict[str, EndpointStats]] = {}
        current = None
        for task in self.tasks():
            if task.client_id != current:
                current = task.client_id
                logger.info("clientId %s", current)
            request = self.builder.build_request(base, task.client_id, task.field, task.endpoint)
            # endpoint key is there even if both aggregations come back empty
            results.setdefault(task.client_id, {})[task.endpoint] = self.executor.execute(request)

        # clients without any endpoints still get a key
        for client_id in self.config.client_ids:
            results.setdefault(client_id, {})
        return results

    def build_report(self) -> Report:
        """Collect everything and wrap it in a Report."""
        if self.config.monthly:
            logger.info("Get monthly stats")
        else:
            logger.info("Get all stats (sentinel range)")
        return Report(
            created=format_timestamp(self.now),
            filter=self.config.filters,
            client_list=self.collect(),
        )

    def close(self) -> None:
        """Close the search client."""
        self.executor.close()

    def __enter__(self) -> "StatisticsStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
