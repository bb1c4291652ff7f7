# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/config/models.py

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class OperatorConfig(BaseModel):
    """Process-wide operator settings consumed while running tasks."""

    model_config = ConfigDict(frozen=True)

    pgo_image_prefix: str = "registry.developers.crunchydata.com/crunchydata"
    pgo_image_tag: str = "latest"
    # keyed by logical container image name, e.g. "pgo-rmdata"
    container_image_overrides: Dict[str, str] = Field(default_factory=dict)
    disable_fsgroup: bool = False
    service_account: str = "pgo-target"

    api_group: str = "crunchydata.com"
    api_version: str = "v1"

    event_address: Optional[str] = None   # nsqd host:port
    kube_context: Optional[str] = None

    def image_override(self, key: str) -> Optional[str]:
        return self.container_image_overrides.get(key) or None
