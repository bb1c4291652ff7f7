# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/jobspec.py
"""
Builds the rmdata Job from task parameters and the cluster descriptor.

Everything here is pure apart from the random job name suffix: the same
parameters, cluster and config always yield the same manifest modulo name.
"""

from __future__ import annotations

import copy
import json
import logging
import secrets
import string
import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config.models import OperatorConfig
from .models import Pgcluster
from .params import RmdataParams

CONTAINER_IMAGE_PGO_RMDATA = "pgo-rmdata"
log = logging.getLogger("pgtask")

RMDATA_JOB_TEMPLATE = "rmdata-job.json.j2"

# the PostgreSQL container's group
PG_FSGROUP = 26

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 4

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


class JobNameGenerator:
    """
    Hands out ``<cluster>-rmdata-<suffix>`` names.

    The last *window* names issued per cluster are remembered and a repeat
    is redrawn, up to MAX_DRAWS times. The window is capped at half the
    suffix space so a free suffix always exists. Thread safe.
    """

    MAX_DRAWS = 32

    def __init__(self, suffix_length: int = SUFFIX_LENGTH, window: int = 16384):
        self.suffix_length = suffix_length
        space = len(SUFFIX_ALPHABET) ** suffix_length
        self.window = max(1, min(window, space // 2))
        self._recent: Dict[str, Deque[str]] = {}
        self._issued: Dict[str, set] = {}
        self._lock = threading.Lock()

    def __call__(self, cluster_name: str) -> str:
        with self._lock:
            recent = self._recent.setdefault(cluster_name, deque())
            issued = self._issued.setdefault(cluster_name, set())

            for _ in range(self.MAX_DRAWS):
                name = f"{cluster_name}-rmdata-{random_suffix(self.suffix_length)}"
                if name not in issued:
                    break
            else:
                log.warning("no unused job name for cluster %s after %d draws; reusing %s",
                            cluster_name, self.MAX_DRAWS, name)

            if name not in issued:
                if len(recent) >= self.window:
                    issued.discard(recent.popleft())
                recent.append(name)
                issued.add(name)
            return name


def image_reference(prefix: str, tag: str) -> str:
    return f"{prefix.rstrip('/')}/{CONTAINER_IMAGE_PGO_RMDATA}:{tag}"


def pod_security_context(supplemental_groups: List[int], *, disable_fsgroup: bool = False) -> Dict[str, Any]:
    ctx: Dict[str, Any] = {"runAsNonRoot": True}
    if supplemental_groups:
        ctx["supplementalGroups"] = list(supplemental_groups)
    if not disable_fsgroup:
        ctx["fsGroup"] = PG_FSGROUP
    return ctx


@dataclass(frozen=True)
class JobSpec:
    name: str
    namespace: str
    cluster_name: str
    image: str
    security_context: Dict[str, Any]
    remove_data: str
    remove_backup: str
    is_replica: str
    is_backup: str
    manifest: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def flags(self) -> Dict[str, str]:
        return {
            "removeData": self.remove_data,
            "removeBackup": self.remove_backup,
            "isReplica": self.is_replica,
            "isBackup": self.is_backup,
        }

    def to_manifest(self) -> Dict[str, Any]:
        return copy.deepcopy(self.manifest)


class JobSpecBuilder:
    def __init__(
        self,
        config: OperatorConfig,
        *,
        name_generator: Optional[JobNameGenerator] = None,
        templates_dir: Path = TEMPLATES_DIR,
    ):
        self.config = config
        self.name_generator = name_generator or JobNameGenerator()
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            undefined=StrictUndefined,
            autoescape=False,
        )

    def build(self, params: RmdataParams, cluster: Pgcluster, namespace: str) -> JobSpec:
        cfg = self.config
        prefix = cluster.spec.pgo_image_prefix or cfg.pgo_image_prefix
        image = cfg.image_override(CONTAINER_IMAGE_PGO_RMDATA) or image_reference(prefix, cfg.pgo_image_tag)
        security_context = pod_security_context(
            cluster.supplemental_groups, disable_fsgroup=cfg.disable_fsgroup
        )
        job_name = self.name_generator(params.cluster_name)

        text = self.env.get_template(RMDATA_JOB_TEMPLATE).render(
            job_name=job_name,
            cluster_name=params.cluster_name,
            pgha_scope=params.pgha_scope,
            replica_name=params.replica_name,
            remove_data=params.remove_data,
            remove_backup=params.remove_backup,
            is_replica=params.is_replica,
            is_backup=params.is_backup,
            image=image,
            security_context=security_context,
            service_account=cfg.service_account,
        )

        return JobSpec(
            name=job_name,
            namespace=namespace,
            cluster_name=params.cluster_name,
            image=image,
            security_context=security_context,
            remove_data=params.remove_data,
            remove_backup=params.remove_backup,
            is_replica=params.is_replica,
            is_backup=params.is_backup,
            manifest=json.loads(text),
        )
