# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/observers/events.py

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events of one task invocation
    namespace: str

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(namespace: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "namespace": namespace,
    }


@dataclass(frozen=True)
class RemoveDataStarted(BaseEvent):
    task: str

@dataclass(frozen=True)
class MarkerRecorded(BaseEvent):
    task: str
    marker: str
    value: str

@dataclass(frozen=True)
class JobSubmitted(BaseEvent):
    task: str
    cluster: str
    job: str
    image: str

@dataclass(frozen=True)
class RemoveDataFailed(BaseEvent):
    task: str
    stage: str
    error: str
    cluster: Optional[str] = None

@dataclass(frozen=True)
class RemoveDataSummary(BaseEvent):
    task: str
    stage: str
    job: Optional[str] = None
    notified: bool = False
