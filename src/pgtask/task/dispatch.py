# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/dispatch.py
from __future__ import annotations

from ..k8s.client import JobRef, JobRunner, JobRunnerError
from .errors import SubmissionError
from .jobspec import JobSpec


def dispatch_job(runner: JobRunner, spec: JobSpec) -> JobRef:
    """Submit *spec* once. A name collision is reported, not retried."""
    try:
        return runner.submit(spec.namespace, spec.to_manifest())
    except JobRunnerError as e:
        raise SubmissionError(
            f"got error when creating rmdata job {spec.name}: {e}", cluster_name=spec.cluster_name
        ) from e
