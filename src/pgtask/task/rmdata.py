# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/rmdata.py
"""
rmdata task: remove a cluster's data volumes and optionally its backups.

One forward pass per invocation:

    START -> MARKED_STARTED -> CLUSTER_RESOLVED -> JOB_BUILT
          -> JOB_DISPATCHED -> NOTIFIED | NOTIFY_FAILED -> DONE

Any fatal error moves to FAILED and is re-raised. Nothing is rolled back:
the marker (and possibly the job) stays in place for the control loop to
inspect. The marker is always written before a job is built.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..config.models import OperatorConfig
from ..events.notify import notify_delete_cluster
from ..events.publisher import EventPublisher
from ..k8s.client import JobRef, JobRunner, ResourceStore
from ..observers.dispatcher import EventBus
from ..observers.interface import Observer
from ..observers.events import (
    JobSubmitted,
    MarkerRecorded,
    RemoveDataFailed,
    RemoveDataStarted,
    RemoveDataSummary,
    new_ctx,
)
from .cluster import resolve_cluster
from .dispatch import dispatch_job
from .errors import TaskError
from .jobspec import JobSpecBuilder
from .marker import MARKER_DELETE_DATA_STARTED, mark_delete_data_started
from .models import Pgtask
from .params import LABEL_PG_CLUSTER, extract_params

log = logging.getLogger("pgtask")


class Stage(str, Enum):
    START = "Start"
    MARKED_STARTED = "MarkedStarted"
    CLUSTER_RESOLVED = "ClusterResolved"
    JOB_BUILT = "JobBuilt"
    JOB_DISPATCHED = "JobDispatched"
    NOTIFIED = "Notified"
    NOTIFY_FAILED = "NotifyFailed"
    DONE = "Done"
    FAILED = "Failed"


@dataclass
class RemoveDataOptions:
    logger: Optional[logging.Logger] = None
    debug: bool = False
    observers: List[Observer] = field(default_factory=list)
    run_id: Optional[str] = None


@dataclass
class RemoveDataReport:
    task: str
    stage: Stage = Stage.START
    marker: Optional[str] = None
    job: Optional[JobRef] = None
    notified: bool = False
    stages: List[Stage] = field(default_factory=list)

    def advance(self, stage: Stage) -> None:
        self.stage = stage
        self.stages.append(stage)


def remove_data(
    task: Pgtask,
    *,
    namespace: str,
    store: ResourceStore,
    jobs: JobRunner,
    publisher: EventPublisher,
    config: OperatorConfig,
    builder: Optional[JobSpecBuilder] = None,
    options: Optional[RemoveDataOptions] = None,
) -> RemoveDataReport:
    options = options or RemoveDataOptions()
    logger = options.logger or log
    builder = builder or JobSpecBuilder(config)
    bus = EventBus(options.observers)
    ctx = new_ctx(namespace, options.run_id)

    report = RemoveDataReport(task=task.name)
    report.advance(Stage.START)
    bus.emit(RemoveDataStarted(task=task.name, **ctx))

    try:
        params = extract_params(task)

        report.marker = mark_delete_data_started(store, task, namespace, logger=logger)
        report.advance(Stage.MARKED_STARTED)
        bus.emit(MarkerRecorded(task=task.name, marker=MARKER_DELETE_DATA_STARTED, value=report.marker, **ctx))

        cluster = resolve_cluster(store, params.cluster_name, namespace)
        report.advance(Stage.CLUSTER_RESOLVED)

        spec = builder.build(params, cluster, namespace)
        report.advance(Stage.JOB_BUILT)
        logger.debug("creating rmdata job %s for cluster %s", spec.name, params.cluster_name)
        if options.debug:
            logger.debug("rmdata job manifest:\n%s", json.dumps(spec.to_manifest(), indent=2))

        report.job = dispatch_job(jobs, spec)
        report.advance(Stage.JOB_DISPATCHED)
        logger.debug("successfully created rmdata job %s", report.job.name)
        bus.emit(JobSubmitted(task=task.name, cluster=params.cluster_name, job=report.job.name, image=spec.image, **ctx))

    except TaskError as e:
        e.stage = report.stage
        e.task_name = e.task_name or task.name
        e.cluster_name = e.cluster_name or task.param(LABEL_PG_CLUSTER) or None
        failed_at = report.stage
        report.advance(Stage.FAILED)
        logger.error("rmdata task failed after %s: %s", failed_at.value, e)
        bus.emit(RemoveDataFailed(task=task.name, stage=failed_at.value, error=str(e), cluster=e.cluster_name, **ctx))
        raise

    report.notified = notify_delete_cluster(
        publisher,
        cluster_name=params.cluster_name,
        cluster_identifier=params.cluster_identifier,
        username=params.username,
        namespace=namespace,
        logger=logger,
    )
    report.advance(Stage.NOTIFIED if report.notified else Stage.NOTIFY_FAILED)
    report.advance(Stage.DONE)

    bus.emit(RemoveDataSummary(
        task=task.name,
        stage=report.stage.value,
        job=report.job.name,
        notified=report.notified,
        **ctx,
    ))
    return report
