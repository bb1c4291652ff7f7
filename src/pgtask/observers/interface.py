# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/observers/interface.py
from __future__ import annotations

from typing import Protocol

from .events import BaseEvent


class Observer(Protocol):
    """Receives task lifecycle events from an EventBus. Must not block for long."""

    def notify(self, event: BaseEvent) -> None: ...
