"""Loaders for the client list file and the JSON command-line arguments.

all of these raise plain ValueError / OSError - turning them into a usage
message and exit code is the cli's job, not ours.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from logstats.models.report import Client

logger = logging.getLogger(__name__)

_CLIENTS = TypeAdapter(list[Client])
_ENDPOINTS = TypeAdapter(dict[str, list[str]])


def parse_filters(raw: str) -> dict[str, Any]:
    """Parse the filter argument: a JSON object of field -> exact value."""
    try:
        filters = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"filter(s) should be valid json\n - {raw}\n - {e}") from e

    if not isinstance(filters, dict):
        raise ValueError(f"filter(s) should be a json object\n - {raw}")
    return filters


def parse_endpoints(raw: str) -> dict[str, list[str]]:
    """Parse the endpoint argument: a JSON object of field -> list of endpoints.

    key order is kept, it decides the order endpoints are queried in.
    """
    try:
        endpoints = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"endpoint(s) should be valid json\n - {raw}\n - {e}") from e

    try:
        return _ENDPOINTS.validate_python(endpoints)
    except ValidationError as e:
        raise ValueError(
            f"endpoint(s) should map a field to a list of endpoints\n - {raw}"
        ) from e


def load_client_ids(path: str | Path) -> list[str]:
    """Read a JSON client list and return the client ids in file order.

    the file is an array of objects that each have at least an "id".
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Client list not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Client list is not valid json: {path}") from e

    try:
        clients = _CLIENTS.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Client list should be an array of objects with an id: {path}") from e

    logger.debug("loaded %d clients from %s", len(clients), path)
    return [client.id for client in clients]
