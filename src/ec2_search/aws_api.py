from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .models import DEFAULT_FILTER_TYPE, InstanceRecord, SearchFilter

TABLE_HEADERS = ("Name", "PrivateIp", "State", "AZ", "InstanceId", "InstanceType", "LaunchTime")
LAUNCH_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


class AwsApiError(Exception):
    """Raised when the EC2 session cannot be set up or the describe call fails."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_boto(cls, error: BotoCoreError | ClientError) -> AwsApiError:
        code = None
        if isinstance(error, ClientError):
            code = error.response.get("Error", {}).get("Code")
        return cls(str(error), code=code)


def build_search_filter(search: str, filter_type: str = DEFAULT_FILTER_TYPE) -> SearchFilter:
    if not search:
        raise ValueError("search term must not be empty")
    return SearchFilter(name=filter_type or DEFAULT_FILTER_TYPE, value=f"*{search}*")


class AwsEc2Service:
    def __init__(self, profile: str | None = None, region: str | None = None) -> None:
        self.profile = profile
        self.region = region
        try:
            self._session = boto3.Session(profile_name=self.profile, region_name=self.region)
        except BotoCoreError as error:
            raise AwsApiError.from_boto(error) from error

    def describe_reservations(self, search_filter: SearchFilter) -> list[dict[str, Any]]:
        logger.debug("Describing instances with filter %s=%s", search_filter.name, search_filter.value)
        reservations: list[dict[str, Any]] = []
        try:
            ec2 = self._session.client("ec2")
            paginator = ec2.get_paginator("describe_instances")
            for page in paginator.paginate(Filters=search_filter.to_request()):
                reservations.extend(page.get("Reservations", []))
        except (BotoCoreError, ClientError) as error:
            raise AwsApiError.from_boto(error) from error
        logger.debug("Received %d reservation(s)", len(reservations))
        return reservations


def records_from_reservations(reservations: Iterable[dict[str, Any]]) -> list[InstanceRecord]:
    return [
        instance_from_response(instance)
        for reservation in reservations
        for instance in reservation.get("Instances", [])
    ]


def instance_from_response(instance: dict[str, Any]) -> InstanceRecord:
    return InstanceRecord(
        instance_id=instance.get("InstanceId"),
        name=_tag_value(instance.get("Tags") or [], "Name"),
        private_ip=instance.get("PrivateIpAddress"),
        state=(instance.get("State") or {}).get("Name"),
        availability_zone=(instance.get("Placement") or {}).get("AvailabilityZone"),
        instance_type=instance.get("InstanceType"),
        launch_time=_parse_launch_time(instance.get("LaunchTime")),
    )


def extract_private_ips(records: Iterable[InstanceRecord]) -> list[str]:
    return [record.private_ip for record in records if record.private_ip]


def build_table_rows(records: Iterable[InstanceRecord]) -> list[list[str]]:
    # Missing fields render blank.
    return [
        [
            record.name,
            record.private_ip or "",
            record.state or "",
            record.availability_zone or "",
            record.instance_id or "",
            record.instance_type or "",
            format_launch_time(record.launch_time),
        ]
        for record in records
    ]


def format_launch_time(value: datetime | str | None) -> str:
    if isinstance(value, str):
        value = _parse_launch_time(value)
    if value is None:
        return ""
    return value.strftime(LAUNCH_TIME_FORMAT)


def _parse_launch_time(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparseable launch time %r", value)
        return None


def _tag_value(tags: Iterable[dict[str, str]], key: str) -> str:
    for tag in tags:
        if tag.get("Key") == key:
            return tag.get("Value") or ""
    return ""
