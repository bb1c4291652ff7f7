# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/observers/logger.py
from __future__ import annotations

import logging

from .events import BaseEvent


class LoggerObserver:
    """Writes lifecycle events to a logger, one line each."""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO):
        self.logger = logger
        self.level = level

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in d.items() if k not in ("ts", "run_id") and v is not None)

        self.logger.log(self.level, "[EVENT] %s: %s", etype, msg)
