# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/errors.py
from __future__ import annotations

from typing import Optional


class TaskError(RuntimeError):
    """Base class for task failures. Carries enough context to diagnose."""

    def __init__(
        self,
        message: str,
        *,
        task_name: Optional[str] = None,
        cluster_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.task_name = task_name
        self.cluster_name = cluster_name
        self.stage = None  # set by the orchestrator

    def __str__(self) -> str:
        base = super().__str__()
        ctx = [f"{k}={v}" for k, v in (("task", self.task_name), ("cluster", self.cluster_name)) if v]
        return f"{base} ({', '.join(ctx)})" if ctx else base


class ValidationError(TaskError):
    """Task request is missing or has bad input."""


class NotFoundError(TaskError):
    """Referenced cluster does not exist."""


class ClusterLookupError(TaskError, LookupError):
    """Cluster could not be read from the resource store."""


class PatchError(TaskError):
    """Status marker write failed; nothing destructive has happened."""


class SubmissionError(TaskError):
    """Job dispatch failed; the status marker is already recorded."""


class NotificationError(TaskError):
    """Event publishing failed. Never fatal."""
