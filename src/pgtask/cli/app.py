# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pydantic
import typer
import yaml

from pgtask.config.loader import load_config
from pgtask.config.models import OperatorConfig
from pgtask.events.publisher import NsqPublisher, NullPublisher
from pgtask.k8s.client import KubeJobRunner, KubeResourceStore, StoreError, load_kube
from pgtask.logging.log import init_logging
from pgtask.observers.jsonfile import JsonFileObserver
from pgtask.observers.logger import LoggerObserver
from pgtask.task.cluster import resolve_cluster
from pgtask.task.errors import TaskError
from pgtask.task.jobspec import JobSpecBuilder
from pgtask.task.models import PGTASK_PLURAL, Pgtask
from pgtask.task.params import RmdataParams
from pgtask.task.rmdata import RemoveDataOptions, remove_data


app = typer.Typer(help="pgtask: run operator maintenance tasks")


def _store(cfg: OperatorConfig) -> KubeResourceStore:
    load_kube(cfg.kube_context)
    return KubeResourceStore(group=cfg.api_group, version=cfg.api_version)


def _publisher(cfg: OperatorConfig):
    if cfg.event_address:
        return NsqPublisher(cfg.event_address)
    return NullPublisher()


@app.command("rmdata")
def rmdata_cmd(
    task: str = typer.Argument(..., help="pgtask resource name"),
    namespace: str = typer.Option(..., "--namespace", "-n"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="operator config YAML"),
    debug: bool = typer.Option(False, "--debug", help="verbose console output and job manifest dump"),
    events_file: Optional[Path] = typer.Option(None, "--events-file", help="append lifecycle events as JSON lines"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
):
    """Mark the task started, submit the rmdata job and announce the cluster deletion."""
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)
    cfg = load_config(config)

    observers = [LoggerObserver(logger)]
    if events_file:
        observers.append(JsonFileObserver(events_file))

    store = _store(cfg)
    try:
        pgtask = Pgtask.from_dict(store.get(PGTASK_PLURAL, task, namespace))
    except StoreError as e:
        typer.secho(f"rmdata failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except pydantic.ValidationError as e:
        typer.secho(f"rmdata failed: pgtask {task} is malformed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        report = remove_data(
            pgtask,
            namespace=namespace,
            store=store,
            jobs=KubeJobRunner(),
            publisher=_publisher(cfg),
            config=cfg,
            options=RemoveDataOptions(logger=logger, debug=debug, observers=observers, run_id=run_id),
        )
    except TaskError as e:
        typer.secho(f"rmdata failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"job {report.job.name} submitted in {namespace} (notified={report.notified})")
    typer.echo(f"log: {log_path}")


@app.command("render-job")
def render_job_cmd(
    cluster: str = typer.Argument(..., help="pgcluster name"),
    namespace: str = typer.Option(..., "--namespace", "-n"),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
    remove_data_flag: str = typer.Option("true", "--remove-data"),
    remove_backup: str = typer.Option("false", "--remove-backup"),
    is_replica: str = typer.Option("false", "--is-replica"),
    is_backup: str = typer.Option("false", "--is-backup"),
    replica_name: str = typer.Option("", "--replica-name"),
):
    """Print the rmdata Job manifest for CLUSTER without submitting it."""
    cfg = load_config(config)
    try:
        pgcluster = resolve_cluster(_store(cfg), cluster, namespace)
    except TaskError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    params = RmdataParams(
        task_name="",
        cluster_name=cluster,
        pgha_scope=cluster,
        replica_name=replica_name,
        is_replica=is_replica,
        is_backup=is_backup,
        remove_data=remove_data_flag,
        remove_backup=remove_backup,
    )
    spec = JobSpecBuilder(cfg).build(params, pgcluster, namespace)
    typer.echo(yaml.safe_dump(spec.to_manifest(), sort_keys=False))


if __name__ == "__main__":
    app()
