"""Wait and status commands.

`bootwatch wait` blocks until the watched control plane pods are running
and every node is Ready. `bootwatch status` prints a one-shot snapshot.
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace

import click

from ..client import load_core_api
from ..config import CLIConfig
from ..errors import ClusterConnectionError, WaitError
from ..formatters import print_status_table, status_to_dict
from ..status import StatusController, wait_until_pods_running

DEFAULT_SYNC_TIMEOUT = 30.0


def _apply_flags(
    config: CLIConfig,
    pods: tuple[str, ...] = (),
    timeout: int | None = None,
    interval: float | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
) -> CLIConfig:
    """Return a copy of config with CLI flags taking precedence."""
    overrides = {
        "pods": list(pods) or None,
        "timeout": timeout,
        "interval": interval,
        "kubeconfig": kubeconfig,
        "context": context,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    sources = dict(config._sources)
    sources.update({key: "flag" for key in overrides})
    return replace(config, _sources=sources, **overrides)


def _connect(config: CLIConfig):
    try:
        return load_core_api(config.kubeconfig, config.context)
    except ClusterConnectionError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)


@click.command()
@click.option("--pod", "pods", multiple=True, help="Pod name prefix to wait for (repeatable)")
@click.option("--timeout", type=int, default=None, help="Seconds to wait before giving up")
@click.option("--interval", type=float, default=None, help="Seconds between status checks")
@click.option("--kubeconfig", default=None, help="Kubeconfig path")
@click.option("--context", default=None, help="Kubeconfig context")
@click.pass_context
def wait(ctx, pods, timeout, interval, kubeconfig, context):
    """Wait for the self-hosted control plane to come up.

    Blocks until every watched pod is Running and every node reports
    Ready=True, printing status lines whenever they change.

    Examples:

        # Wait for the default control plane pods
        bootwatch wait

        # Wait for specific pods, give up after 10 minutes
        bootwatch wait --pod kube-system/kube-apiserver --pod kube-system/etcd --timeout 600
    """
    config = _apply_flags(ctx.obj["config"], pods, timeout, interval, kubeconfig, context)
    core_api = _connect(config)

    click.echo(f"Waiting up to {config.timeout}s for {len(config.pods)} control plane pod(s)")
    try:
        wait_until_pods_running(
            core_api,
            config.pods,
            timeout_seconds=config.timeout,
            interval_seconds=config.interval,
        )
    except WaitError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)


@click.command()
@click.option("--pod", "pods", multiple=True, help="Pod name prefix to report (repeatable)")
@click.option(
    "--sync-timeout",
    type=float,
    default=DEFAULT_SYNC_TIMEOUT,
    help="Seconds to wait for the initial pod and node lists",
)
@click.option("--kubeconfig", default=None, help="Kubeconfig path")
@click.option("--context", default=None, help="Kubeconfig context")
@click.pass_context
def status(ctx, pods, sync_timeout, kubeconfig, context):
    """Show the current control plane status.

    Exits 0 when everything is running, 2 when not.
    """
    config = _apply_flags(ctx.obj["config"], pods, kubeconfig=kubeconfig, context=context)
    core_api = _connect(config)

    controller = StatusController.from_api(core_api, config.pods, output=lambda line: None)
    controller.run()
    try:
        if not controller.wait_for_sync(sync_timeout):
            click.echo("✗ Timed out waiting for the initial pod and node lists", err=True)
            sys.exit(1)
        pod_snapshot = controller.pod_status()
        node_snapshot = controller.node_status()
        result = controller.evaluate()
    finally:
        controller.stop()

    if ctx.obj["json_output"]:
        click.echo(json.dumps(status_to_dict(pod_snapshot, node_snapshot, result), indent=2))
    else:
        print_status_table(pod_snapshot, node_snapshot, result)

    sys.exit(0 if result.ready else 2)
