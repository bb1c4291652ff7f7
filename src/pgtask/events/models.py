# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/events/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

EVENT_TOPIC_ALL = "alltopic"
EVENT_TOPIC_CLUSTER = "clustertopic"

EVENT_DELETE_CLUSTER = "DeleteCluster"


@dataclass(frozen=True)
class EventHeader:
    namespace: str
    username: str
    topic: Tuple[str, ...]
    timestamp: str
    event_type: str

    def dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["topic"] = list(self.topic)
        return d


@dataclass(frozen=True)
class EventDeleteCluster(EventHeader):
    clustername: str
    cluster_identifier: str = ""


def delete_cluster_event(
    *,
    cluster_name: str,
    cluster_identifier: str,
    username: str,
    namespace: str,
) -> EventDeleteCluster:
    return EventDeleteCluster(
        namespace=namespace,
        username=username,
        topic=(EVENT_TOPIC_CLUSTER,),
        timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        event_type=EVENT_DELETE_CLUSTER,
        clustername=cluster_name,
        cluster_identifier=cluster_identifier,
    )
