import logging
import re

from pgtask.config.models import OperatorConfig
from pgtask.task import jobspec
from pgtask.task.jobspec import (
    PG_FSGROUP,
    JobNameGenerator,
    JobSpecBuilder,
    image_reference,
    pod_security_context,
)
from pgtask.task.models import Pgcluster
from pgtask.task.params import RmdataParams

from conftest import make_cluster


def _params(**kw):
    base = dict(
        task_name="t1",
        cluster_name="mycluster",
        pgha_scope="mycluster",
        replica_name="",
        is_replica="false",
        is_backup="false",
        remove_data="true",
        remove_backup="false",
    )
    base.update(kw)
    return RmdataParams(**base)


def _env(manifest):
    container = manifest["spec"]["template"]["spec"]["containers"][0]
    return {e["name"]: e.get("value") for e in container["env"]}


def test_job_names_are_distinct_for_same_cluster():
    gen = JobNameGenerator()
    names = [gen("mycluster") for _ in range(10_000)]
    assert len(set(names)) == len(names)
    assert all(re.fullmatch(r"mycluster-rmdata-[a-z0-9]{4}", n) for n in names)


def test_build_uses_default_prefix_when_cluster_has_none():
    cfg = OperatorConfig(pgo_image_prefix="crunchydata/", pgo_image_tag="v1")
    spec = JobSpecBuilder(cfg).build(_params(), Pgcluster.from_dict(make_cluster(prefix="")), "pgo")

    assert spec.image == "crunchydata/pgo-rmdata:v1"
    container = spec.manifest["spec"]["template"]["spec"]["containers"][0]
    assert container["image"] == "crunchydata/pgo-rmdata:v1"


def test_cluster_prefix_wins_but_tag_is_global():
    cfg = OperatorConfig(pgo_image_prefix="crunchydata", pgo_image_tag="v1")
    spec = JobSpecBuilder(cfg).build(_params(), Pgcluster.from_dict(make_cluster(prefix="quay.io/me")), "pgo")
    assert spec.image == "quay.io/me/pgo-rmdata:v1"


def test_image_override_replaces_reference():
    cfg = OperatorConfig(
        pgo_image_prefix="crunchydata",
        pgo_image_tag="v1",
        container_image_overrides={"pgo-rmdata": "mirror.local/rmdata@sha256:abc"},
    )
    spec = JobSpecBuilder(cfg).build(_params(), Pgcluster.from_dict(make_cluster()), "pgo")
    assert spec.image == "mirror.local/rmdata@sha256:abc"
    assert spec.manifest["spec"]["template"]["spec"]["containers"][0]["image"] == spec.image


def test_manifest_carries_flags_labels_and_security_context():
    cfg = OperatorConfig(pgo_image_prefix="crunchydata", pgo_image_tag="v1", service_account="sa")
    cluster = Pgcluster.from_dict(make_cluster(groups="65534"))
    spec = JobSpecBuilder(cfg).build(
        _params(is_replica="true", replica_name="mycluster-xyz", remove_backup="TRUE"), cluster, "pgo"
    )
    m = spec.manifest

    assert m["kind"] == "Job"
    assert m["metadata"]["name"] == spec.name
    assert m["metadata"]["labels"] == {"vendor": "crunchydata", "pgrmdata": "true", "pg-cluster": "mycluster"}
    assert m["spec"]["backoffLimit"] == 0

    pod = m["spec"]["template"]["spec"]
    assert pod["restartPolicy"] == "Never"
    assert pod["serviceAccountName"] == "sa"
    assert pod["securityContext"] == {"runAsNonRoot": True, "supplementalGroups": [65534], "fsGroup": PG_FSGROUP}

    env = _env(m)
    assert env["PG_CLUSTER"] == "mycluster"
    assert env["REPLICA_NAME"] == "mycluster-xyz"
    assert env["REMOVE_DATA"] == "true"
    assert env["REMOVE_BACKUP"] == "TRUE"
    assert env["IS_REPLICA"] == "true"
    assert env["IS_BACKUP"] == "false"
    assert spec.flags == {"removeData": "true", "removeBackup": "TRUE", "isReplica": "true", "isBackup": "false"}


def test_values_are_json_escaped():
    cfg = OperatorConfig()
    spec = JobSpecBuilder(cfg).build(_params(replica_name='we"ird'), Pgcluster.from_dict(make_cluster()), "pgo")
    assert _env(spec.manifest)["REPLICA_NAME"] == 'we"ird'


def test_to_manifest_returns_a_copy():
    spec = JobSpecBuilder(OperatorConfig()).build(_params(), Pgcluster.from_dict(make_cluster()), "pgo")
    spec.to_manifest()["metadata"]["name"] = "changed"
    assert spec.manifest["metadata"]["name"] == spec.name


def test_security_context_without_fsgroup():
    assert pod_security_context([], disable_fsgroup=True) == {"runAsNonRoot": True}


def test_image_reference_does_not_double_slash():
    assert image_reference("crunchydata/", "v1") == image_reference("crunchydata", "v1")


def test_small_suffix_space_never_hangs():
    gen = JobNameGenerator(suffix_length=1)
    names = [gen("c") for _ in range(200)]
    assert len(names) == 200
    assert gen.window == 18
    assert all(re.fullmatch(r"c-rmdata-[a-z0-9]", n) for n in names)


def test_exhausted_draws_fall_back_to_a_repeat(monkeypatch, caplog):
    monkeypatch.setattr(jobspec, "random_suffix", lambda length: "aaaa")
    gen = JobNameGenerator()

    assert gen("c") == "c-rmdata-aaaa"
    with caplog.at_level(logging.WARNING, logger="pgtask"):
        assert gen("c") == "c-rmdata-aaaa"
    assert "no unused job name" in caplog.text


def test_names_are_tracked_per_cluster(monkeypatch):
    monkeypatch.setattr(jobspec, "random_suffix", lambda length: "abcd")
    gen = JobNameGenerator()
    assert gen("a") == "a-rmdata-abcd"
    assert gen("b") == "b-rmdata-abcd"


def test_window_evicts_oldest_names():
    gen = JobNameGenerator(suffix_length=2, window=3)
    for _ in range(10):
        gen("c")
    assert len(gen._recent["c"]) == 3
    assert gen._issued["c"] == set(gen._recent["c"])
