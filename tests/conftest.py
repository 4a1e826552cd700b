"""Pytest fixtures for logstats tests."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from logstats.executor.search_executor import SearchExecutor
from logstats.models.config import RunConfig


class FakeSearchClient:
    """Stands in for the elasticsearch client.

    records every search call and answers all of them with the same response.
    """

    def __init__(self, response: dict[str, Any] | None = None, **kwargs: Any) -> None:
        self.response = response if response is not None else hourly_only_response()
        self.init_kwargs = kwargs
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def search(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        return self.response

    def close(self) -> None:
        self.closed = True


class FailingSearchClient(FakeSearchClient):
    def search(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        raise ConnectionError("backend unreachable")


def hourly_only_response() -> dict[str, Any]:
    return {
        "aggregations": {
            "hoursum": {
                "buckets": [{"key_as_string": "2023-01-01T00:00:00Z", "doc_count": 5}]
            },
            "daysum": {"buckets": []},
        }
    }


@pytest.fixture
def sample_clients() -> list[dict]:
    """Client records as they appear in the client list file."""
    return [
        {"id": "client-a", "name": "Client A", "secret": "xxx"},
        {"id": "client-b", "name": "Client B"},
    ]


@pytest.fixture
def client_file(tmp_path: Path, sample_clients: list[dict]) -> Path:
    """Write the sample client list to a temporary file."""
    path = tmp_path / "clients.json"
    path.write_text(json.dumps(sample_clients))
    return path


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 15, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def executor(fake_client: FakeSearchClient) -> SearchExecutor:
    return SearchExecutor("http://elk.test:9200", client=fake_client)


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """Two clients, one endpoint, one filter."""
    return RunConfig(
        host="http://elk.test:9200",
        filters={"app": "my_app", "level": "INFO"},
        endpoints={"endpointName": ["endp-1"]},
        output=tmp_path / "out.json",
        client_ids=["client-a", "client-b"],
    )
