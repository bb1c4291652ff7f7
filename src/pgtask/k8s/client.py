# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/k8s/client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException

log = logging.getLogger("pgtask")

MERGE_PATCH_CONTENT_TYPE = "application/merge-patch+json"


class StoreError(RuntimeError):
    """Resource store request failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class StoreNotFound(StoreError):
    pass


class StoreConflict(StoreError):
    pass


class JobRunnerError(RuntimeError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class JobRef:
    name: str
    namespace: str
    uid: Optional[str] = None


class ResourceStore(Protocol):
    def get(self, kind: str, name: str, namespace: str) -> Dict[str, Any]: ...
    def patch(self, kind: str, name: str, namespace: str, diff: Dict[str, Any]) -> Dict[str, Any]: ...


class JobRunner(Protocol):
    def submit(self, namespace: str, manifest: Dict[str, Any]) -> JobRef: ...


def load_kube(kube_context: Optional[str] = None) -> None:
    """Load in-cluster credentials, falling back to the local kubeconfig."""
    if kube_context:
        config.load_kube_config(context=kube_context)
        return
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def _translate(exc: ApiException, what: str) -> StoreError:
    if exc.status == 404:
        return StoreNotFound(f"{what} not found", status=404)
    if exc.status == 409:
        return StoreConflict(f"{what} conflict: {exc.reason}", status=409)
    return StoreError(f"{what} failed: {exc.status} {exc.reason}", status=exc.status)


class KubeResourceStore:
    """
    Custom resources (pgtasks, pgclusters) read and patched through the
    CustomObjectsApi. *kind* is the resource plural.
    """

    def __init__(self, *, group: str, version: str, api: Optional[client.CustomObjectsApi] = None):
        self.group = group
        self.version = version
        self.api = api or client.CustomObjectsApi()

    def get(self, kind: str, name: str, namespace: str) -> Dict[str, Any]:
        try:
            return self.api.get_namespaced_custom_object(
                group=self.group,
                version=self.version,
                namespace=namespace,
                plural=kind,
                name=name,
            )
        except ApiException as e:
            raise _translate(e, f"get {kind}/{name} in {namespace}") from e

    def patch(self, kind: str, name: str, namespace: str, diff: Dict[str, Any]) -> Dict[str, Any]:
        log.debug("patch %s/%s in %s: %s", kind, name, namespace, diff)
        try:
            return self.api.patch_namespaced_custom_object(
                group=self.group,
                version=self.version,
                namespace=namespace,
                plural=kind,
                name=name,
                body=diff,
                _content_type=MERGE_PATCH_CONTENT_TYPE,
            )
        except ApiException as e:
            raise _translate(e, f"patch {kind}/{name} in {namespace}") from e


class KubeJobRunner:
    """Submits batch/v1 Jobs."""

    def __init__(self, api: Optional[client.BatchV1Api] = None):
        self.api = api or client.BatchV1Api()

    def submit(self, namespace: str, manifest: Dict[str, Any]) -> JobRef:
        name = manifest.get("metadata", {}).get("name", "")
        try:
            job = self.api.create_namespaced_job(namespace=namespace, body=manifest)
        except ApiException as e:
            raise JobRunnerError(
                f"create job {name} in {namespace} failed: {e.status} {e.reason}",
                status=e.status,
            ) from e
        meta = job.metadata
        return JobRef(name=meta.name, namespace=meta.namespace or namespace, uid=meta.uid)
