# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/events/publisher.py
from __future__ import annotations

import logging
from typing import Protocol

import requests

from ..task.errors import NotificationError
from .models import EventHeader

log = logging.getLogger("pgtask")


class EventPublisher(Protocol):
    def publish(self, event: EventHeader) -> None: ...


class NsqPublisher:
    """Publishes events through nsqd's HTTP ``/pub`` endpoint, one POST per topic."""

    def __init__(self, address: str, *, timeout: float = 5.0, session: requests.Session | None = None):
        self.address = address
        self.timeout = timeout
        self.session = session or requests.Session()

    def publish(self, event: EventHeader) -> None:
        body = event.dict()
        for topic in event.topic:
            url = f"http://{self.address}/pub"
            try:
                resp = self.session.post(url, params={"topic": topic}, json=body, timeout=self.timeout)
                resp.raise_for_status()
            except requests.RequestException as e:
                raise NotificationError(f"publish {event.event_type} to {topic} failed: {e}") from e
            log.debug("published %s to %s", event.event_type, topic)


class NullPublisher:
    """Used when no event address is configured."""

    def publish(self, event: EventHeader) -> None:
        log.debug("no event address configured; dropping %s", event.event_type)
