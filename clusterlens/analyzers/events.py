"""Lookup of the most recent event recorded for an object."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from clusterlens.cluster import Cluster

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _last_timestamp(event: dict[str, Any]) -> datetime:
    value = event.get("lastTimestamp")
    if not value:
        return _ZERO_TIME
    if isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def fetch_latest_event(
    cluster: Cluster, namespace: str, name: str
) -> dict[str, Any] | None:
    """Return the event about the named object with the latest timestamp, or None.

    When several events share the latest timestamp, the first one listed wins.
    """
    events = cluster.list(
        "Event", namespace, field_selector=f"involvedObject.name={name}"
    )
    latest: dict[str, Any] | None = None
    for event in events:
        if latest is None or _last_timestamp(event) > _last_timestamp(latest):
            latest = event
    return latest