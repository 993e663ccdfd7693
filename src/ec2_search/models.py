from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DEFAULT_FILTER_TYPE = "tag:Name"
DEFAULT_DELIMITER = " "


@dataclass(slots=True, frozen=True)
class InstanceRecord:
    instance_id: str | None
    name: str
    private_ip: str | None
    state: str | None
    availability_zone: str | None
    instance_type: str | None
    launch_time: datetime | None


@dataclass(slots=True, frozen=True)
class SearchFilter:
    """A single provider-side attribute/pattern pair."""

    name: str
    value: str

    def to_request(self) -> list[dict[str, object]]:
        return [{"Name": self.name, "Values": [self.value]}]


@dataclass(slots=True, frozen=True)
class SearchConfig:
    search: str
    ip_only: bool = False
    new_line: bool = False
    delimiter: str = DEFAULT_DELIMITER
    filter_type: str = DEFAULT_FILTER_TYPE
    profile: str | None = None
    region: str | None = None
    debug: bool = False
