# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/marker.py
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..k8s.client import ResourceStore, StoreError
from ..k8s.merge_patch import apply_merge_patch, create_merge_patch
from .errors import PatchError
from .models import PGTASK_PLURAL, Pgtask

log = logging.getLogger("pgtask")

MARKER_DELETE_DATA_STARTED = "delete-data-started"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def now_timestamp() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def mark_status(
    store: ResourceStore,
    task: Pgtask,
    namespace: str,
    marker: str,
    *,
    clock: Callable[[], str] = now_timestamp,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Record ``status[marker] = <now>`` on *task* as a merge patch.

    The diff is taken between a snapshot of the task and a mutated copy,
    so only the marker key is sent. *task* is updated in place once the
    store accepts the patch. Returns the timestamp written.
    """
    logger = logger or log
    before = task.to_dict()
    after = copy.deepcopy(before)
    stamp = clock()
    after.setdefault("status", {})[marker] = stamp

    diff = create_merge_patch(before, after)
    logger.debug("status patch for task %s: %s", task.name, diff)

    if not diff:
        logger.debug("marker %s already at %s on task %s", marker, stamp, task.name)
        return stamp

    try:
        store.patch(PGTASK_PLURAL, task.name, namespace, diff)
    except StoreError as e:
        raise PatchError(f"could not set {marker} marker: {e}", task_name=task.name) from e

    task.status = apply_merge_patch(before, diff)["status"]
    return stamp


def mark_delete_data_started(store: ResourceStore, task: Pgtask, namespace: str, **kwargs) -> str:
    return mark_status(store, task, namespace, MARKER_DELETE_DATA_STARTED, **kwargs)
