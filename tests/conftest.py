# tests/conftest.py
from __future__ import annotations

import copy

import pytest

from pgtask.config.models import OperatorConfig
from pgtask.k8s.client import JobRef, StoreNotFound
from pgtask.k8s.merge_patch import apply_merge_patch
from pgtask.task.models import PGCLUSTER_PLURAL


class FakeStore:
    """In-memory resource store recording every call."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.fail_patch = None
        self.fail_get = None

    def add(self, kind, obj):
        meta = obj["metadata"]
        self.objects[(kind, meta.get("namespace", "pgo"), meta["name"])] = copy.deepcopy(obj)

    def get(self, kind, name, namespace):
        self.calls.append(("get", kind, name))
        if self.fail_get:
            raise self.fail_get
        try:
            return copy.deepcopy(self.objects[(kind, namespace, name)])
        except KeyError:
            raise StoreNotFound(f"{kind}/{name} not found", status=404)

    def patch(self, kind, name, namespace, diff):
        self.calls.append(("patch", kind, name, copy.deepcopy(diff)))
        if self.fail_patch:
            raise self.fail_patch
        key = (kind, namespace, name)
        self.objects[key] = apply_merge_patch(self.objects.get(key, {}), diff)
        return self.objects[key]

    def patches(self):
        return [c for c in self.calls if c[0] == "patch"]


class FakeJobs:
    def __init__(self, error: Exception | None = None):
        self.submitted = []
        self.error = error

    def submit(self, namespace, manifest):
        if self.error:
            raise self.error
        self.submitted.append((namespace, manifest))
        return JobRef(name=manifest["metadata"]["name"], namespace=namespace, uid="uid-1")


class FakePublisher:
    def __init__(self, error: Exception | None = None):
        self.events = []
        self.error = error

    def publish(self, event):
        if self.error:
            raise self.error
        self.events.append(event)


def make_task(name="t1", namespace="pgo", **params):
    return {
        "apiVersion": "crunchydata.com/v1",
        "kind": "Pgtask",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"pg-cluster-id": "abc-123", "pgouser": "admin"},
        },
        "spec": {"name": name, "tasktype": "delete-data", "parameters": dict(params)},
        "status": {"state": "", "message": ""},
    }


def make_cluster(name="mycluster", namespace="pgo", prefix="", groups=""):
    return {
        "apiVersion": "crunchydata.com/v1",
        "kind": "Pgcluster",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "name": name,
            "pgoimageprefix": prefix,
            "PrimaryStorage": {"supplementalgroups": groups},
        },
    }


@pytest.fixture
def store():
    s = FakeStore()
    s.add(PGCLUSTER_PLURAL, make_cluster())
    return s


@pytest.fixture
def config():
    return OperatorConfig(pgo_image_prefix="crunchydata/", pgo_image_tag="v1")

