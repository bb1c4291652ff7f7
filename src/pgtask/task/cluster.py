# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/task/cluster.py
from __future__ import annotations

import pydantic

from ..k8s.client import ResourceStore, StoreError, StoreNotFound
from .errors import ClusterLookupError, NotFoundError
from .models import PGCLUSTER_PLURAL, Pgcluster


def resolve_cluster(store: ResourceStore, cluster_name: str, namespace: str) -> Pgcluster:
    try:
        obj = store.get(PGCLUSTER_PLURAL, cluster_name, namespace)
    except StoreNotFound as e:
        raise NotFoundError(
            f"pgcluster {cluster_name} not found in {namespace}", cluster_name=cluster_name
        ) from e
    except StoreError as e:
        raise ClusterLookupError(
            f"could not read pgcluster {cluster_name}: {e}", cluster_name=cluster_name
        ) from e

    try:
        return Pgcluster.from_dict(obj)
    except pydantic.ValidationError as e:
        raise ClusterLookupError(
            f"pgcluster {cluster_name} is malformed: {e.error_count()} invalid field(s)",
            cluster_name=cluster_name,
        ) from e
