"""Run configuration for logstats.

everything the run needs is gathered here once at startup and handed to the
builder, executor and store explicitly. nothing reads module globals.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIME_ZONE = "Europe/Copenhagen"
DEFAULT_TIMESTAMP_FIELD = "timestamp"
DEFAULT_CLIENT_FIELD = "clientId"


class RunConfig(BaseModel):
    """Settings for a single statistics run.

    frozen so a run can't accidentally change its own filters halfway through
    the client loop.
    """

    model_config = ConfigDict(frozen=True)

    host: str  # may embed basic-auth credentials
    filters: dict[str, Any]  # field -> exact value
    endpoints: dict[str, list[str]]  # field -> endpoint values
    output: Path
    monthly: bool = False
    index: str | None = None  # None searches every index
    time_zone: str = DEFAULT_TIME_ZONE
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD
    client_field: str = DEFAULT_CLIENT_FIELD
    client_ids: list[str] = Field(default_factory=list)
