# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/config/loader.py

import logging
import os
from pathlib import Path

import yaml

from .models import OperatorConfig

log = logging.getLogger("pgtask")

ENV_CONFIG_FILE = "PGTASK_CONFIG"


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_config(path: str | Path | None = None) -> OperatorConfig:
    """
    Load and validate the operator config.

    Resolution order for the file:
      1. the explicit *path* argument
      2. the ``PGTASK_CONFIG`` environment variable
      3. none at all, in which case the built-in defaults are used

    ``${ENV_VAR}`` placeholders inside the file are resolved at load time.
    """
    if path is None:
        env = os.environ.get(ENV_CONFIG_FILE)
        if not env:
            log.debug("No config file given; using defaults")
            return OperatorConfig()
        path = env

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    log.debug("Loading config from %s", path)
    return OperatorConfig.model_validate(_load_yaml(path))
