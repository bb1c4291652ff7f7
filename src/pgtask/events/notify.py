# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/events/notify.py
from __future__ import annotations

import logging
from typing import Optional

from .models import delete_cluster_event
from .publisher import EventPublisher

log = logging.getLogger("pgtask")


def notify_delete_cluster(
    publisher: EventPublisher,
    *,
    cluster_name: str,
    cluster_identifier: str,
    username: str,
    namespace: str,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """Fire a DeleteCluster event. Failures are logged and reported as False."""
    logger = logger or log
    event = delete_cluster_event(
        cluster_name=cluster_name,
        cluster_identifier=cluster_identifier,
        username=username,
        namespace=namespace,
    )
    try:
        publisher.publish(event)
    except Exception as e:  # publishing must never fail the task
        logger.error("could not publish delete cluster event for %s: %s", cluster_name, e)
        return False
    return True
