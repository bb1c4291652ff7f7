# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/models.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PGTASK_PLURAL = "pgtasks"
PGCLUSTER_PLURAL = "pgclusters"


class ObjectMeta(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    namespace: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)


class StorageSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    supplemental_groups: List[int] = Field(default_factory=list, alias="supplementalgroups")

    @field_validator("supplemental_groups", mode="before")
    @classmethod
    def _split_groups(cls, v):
        # stored on the resource as "65534,1000"
        if v is None:
            return []
        if isinstance(v, str):
            return [int(g) for g in v.split(",") if g.strip()]
        return v


class PgtaskSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    task_type: str = Field("", alias="tasktype")
    parameters: Dict[str, str] = Field(default_factory=dict)


class Pgtask(BaseModel):
    """A task request. ``status`` holds free-form marker timestamps."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field("crunchydata.com/v1", alias="apiVersion")
    kind: str = "Pgtask"
    metadata: ObjectMeta
    spec: PgtaskSpec = Field(default_factory=PgtaskSpec)
    status: Dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    def param(self, key: str) -> str:
        return self.spec.parameters.get(key, "")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "Pgtask":
        return cls.model_validate(obj)


class PgclusterSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    pgo_image_prefix: str = Field("", alias="pgoimageprefix")
    primary_storage: StorageSpec = Field(default_factory=StorageSpec, alias="PrimaryStorage")


class Pgcluster(BaseModel):
    """Cluster descriptor. Read-only here."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    metadata: ObjectMeta
    spec: PgclusterSpec = Field(default_factory=PgclusterSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def supplemental_groups(self) -> List[int]:
        return list(self.spec.primary_storage.supplemental_groups)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "Pgcluster":
        return cls.model_validate(obj)
