"""Pydantic models for client lists and the statistics report."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Client(BaseModel):
    """A client record from the client list file.

    the file carries more than this (names, credentials, ...) but only the id
    is used for scoping, so anything else is ignored. numeric ids show up in
    some client files, they end up as string keys in the report either way.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str


class SearchResultEntry(BaseModel):
    """One histogram bucket: bucket start in UTC and its document count."""

    date: str
    count: int


# aggregation name -> series
EndpointStats = dict[str, list[SearchResultEntry]]


class Report(BaseModel):
    """The report written at the end of a run.

    field order matters here - it's the key order in the output file.
    """

    model_config = ConfigDict(populate_by_name=True)

    created: str
    filter: dict[str, Any]
    client_list: dict[str, dict[str, EndpointStats]] = Field(
        default_factory=dict, alias="clientList"
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with the camelCase keys used in the output file."""
        return self.model_dump(by_alias=True)
