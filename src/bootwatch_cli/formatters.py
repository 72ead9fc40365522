"""CLI output formatting helpers."""

from typing import Any

import click
import yaml
from rich.console import Console
from rich.table import Table

from .status import NodeReadyCondition, PodPhase, ReadinessResult


def print_config_yaml(data: dict[str, Any], section: str | None = None) -> None:
    """Print config as YAML.

    Args:
        data: Configuration data
        section: Optional section name for header
    """
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if section:
        click.echo(f"{section}:")
        for line in yaml_str.splitlines():
            click.echo(f"  {line}")
    else:
        click.echo(yaml_str)


def status_to_dict(
    pods: dict[str, PodPhase],
    nodes: dict[str, NodeReadyCondition],
    result: ReadinessResult,
) -> dict[str, Any]:
    """Convert snapshots and the readiness result to a JSON-ready dict."""
    return {
        "ready": result.ready,
        "readiness": result.readiness.value,
        "reason": result.reason,
        "pods": {name: phase.value for name, phase in pods.items()},
        "nodes": {
            name: {
                "status": condition.status,
                "reason": condition.reason,
                "message": condition.message,
            }
            for name, condition in nodes.items()
        },
    }


def print_status_table(
    pods: dict[str, PodPhase],
    nodes: dict[str, NodeReadyCondition],
    result: ReadinessResult,
) -> None:
    """Print pod phases and node conditions as tables.

    Args:
        pods: Pod snapshot
        nodes: Node snapshot
        result: Readiness evaluation
    """
    console = Console()

    pod_table = Table(title="Control plane pods")
    pod_table.add_column("Pod")
    pod_table.add_column("Phase")
    for name, phase in pods.items():
        style = "green" if phase == PodPhase.RUNNING else "red"
        pod_table.add_row(name, f"[{style}]{phase.value}[/{style}]")
    console.print(pod_table)

    node_table = Table(title="Nodes")
    node_table.add_column("Node")
    node_table.add_column("Ready")
    node_table.add_column("Reason")
    for name, condition in nodes.items():
        style = "green" if condition.ready else "red"
        node_table.add_row(
            name, f"[{style}]{condition.status}[/{style}]", condition.reason or ""
        )
    console.print(node_table)

    if result.ready:
        console.print("[green]✓ All control plane components running[/green]")
    else:
        console.print(f"[yellow]⚠ Not ready: {result.reason}[/yellow]")
