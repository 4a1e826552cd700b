"""Pydantic models for search requests.

a request is a frozen value: the base request is built once and every
(client, endpoint) pair gets its own copy from the builder, never an edited one.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict


class DateRange(BaseModel):
    """Inclusive date range applied to the timestamp field."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date


class SearchRequest(BaseModel):
    """A size-0 aggregation search.

    filters are kept as a tuple so the request can't grow clauses after it
    has been built.
    """

    model_config = ConfigDict(frozen=True)

    filters: tuple[dict[str, Any], ...]
    aggs: dict[str, dict[str, Any]]
    size: int = 0
    index: str | None = None

    def body(self) -> dict[str, Any]:
        """Query body in the shape elasticsearch expects."""
        return {
            "query": {"bool": {"filter": [dict(clause) for clause in self.filters]}},
            "aggs": {name: dict(agg) for name, agg in self.aggs.items()},
        }

    def to_dict(self) -> dict[str, Any]:
        """The full request as it goes over the wire, for logging and show-query."""
        request: dict[str, Any] = {"size": self.size, "body": self.body()}
        if self.index:
            request["index"] = self.index
        return request
