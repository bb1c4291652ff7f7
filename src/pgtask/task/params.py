# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/params.py
from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError
from .models import Pgtask

# task parameter keys
LABEL_PG_CLUSTER = "pg-cluster"
LABEL_PGHA_SCOPE = "crunchy-pgha-scope"
LABEL_REPLICA_NAME = "replica-name"
LABEL_IS_REPLICA = "is-replica"
LABEL_IS_BACKUP = "is-backup"
LABEL_DELETE_DATA = "delete-data"
LABEL_DELETE_BACKUPS = "delete-backups"

# task metadata labels
LABEL_PG_CLUSTER_IDENTIFIER = "pg-cluster-id"
LABEL_PGOUSER = "pgouser"


@dataclass(frozen=True)
class RmdataParams:
    task_name: str
    cluster_name: str
    pgha_scope: str
    replica_name: str
    is_replica: str
    is_backup: str
    remove_data: str
    remove_backup: str
    cluster_identifier: str = ""
    username: str = ""


def extract_params(task: Pgtask) -> RmdataParams:
    """Read the rmdata parameters off *task*. Flags are kept verbatim."""
    cluster_name = task.param(LABEL_PG_CLUSTER)
    if not cluster_name:
        raise ValidationError("unable to create rmdata job, clustername is empty", task_name=task.name)

    labels = task.metadata.labels
    return RmdataParams(
        task_name=task.name,
        cluster_name=cluster_name,
        pgha_scope=task.param(LABEL_PGHA_SCOPE),
        replica_name=task.param(LABEL_REPLICA_NAME),
        is_replica=task.param(LABEL_IS_REPLICA),
        is_backup=task.param(LABEL_IS_BACKUP),
        remove_data=task.param(LABEL_DELETE_DATA),
        remove_backup=task.param(LABEL_DELETE_BACKUPS),
        cluster_identifier=labels.get(LABEL_PG_CLUSTER_IDENTIFIER, ""),
        username=labels.get(LABEL_PGOUSER, ""),
    )
