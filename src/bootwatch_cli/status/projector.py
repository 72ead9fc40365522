"""Reduce mirrored pods and nodes to per-entity status values.

Snapshots are rebuilt from the mirrors on every call. Report lines are
written to the user-facing output only when a snapshot differs from the
previous one.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

import click

NODE_READY = "Ready"
CONDITION_TRUE = "True"


class PodPhase(str, Enum):
    """Lifecycle phase of a watched pod."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"
    DOES_NOT_EXIST = "DoesNotExist"  # No matching object in the mirror

    @classmethod
    def from_api(cls, phase: str | None) -> PodPhase:
        """Map an API phase string, treating missing or unknown values as Unknown."""
        try:
            return cls(phase)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NodeReadyCondition:
    """The Ready condition of a node."""

    status: str
    reason: str | None = None
    message: str | None = None
    last_transition_time: datetime | None = None

    @classmethod
    def from_api(cls, condition: Any) -> NodeReadyCondition:
        return cls(
            status=condition.status,
            reason=condition.reason,
            message=condition.message,
            last_transition_time=condition.last_transition_time,
        )

    @property
    def ready(self) -> bool:
        return self.status == CONDITION_TRUE

    def __str__(self) -> str:
        if self.reason:
            return f"{NODE_READY}={self.status} ({self.reason})"
        return f"{NODE_READY}={self.status}"


class StatusSource(Protocol):
    """Read side of a resource mirror."""

    def list_keys(self) -> list[str]: ...

    def get_by_key(self, key: str) -> tuple[Any | None, bool]: ...

    def list(self) -> list[Any]: ...


class StatusProjector:
    """Builds pod and node snapshots and reports changes."""

    def __init__(
        self,
        pod_source: StatusSource,
        node_source: StatusSource,
        watch_pods: Iterable[str],
        output: Callable[[str], None] = click.echo,
    ):
        """Initialize the projector.

        Args:
            pod_source: Mirror of pods across all namespaces.
            node_source: Mirror of cluster nodes.
            watch_pods: Pod name prefixes to track; fixed for the projector's lifetime.
            output: Sink for user-facing report lines.
        """
        self.pod_source = pod_source
        self.node_source = node_source
        self.watch_pods = tuple(watch_pods)
        self._output = output
        self._last_pod_snapshot: dict[str, PodPhase] | None = None
        self._last_node_snapshot: dict[str, NodeReadyCondition] | None = None

    @property
    def last_pod_snapshot(self) -> dict[str, PodPhase] | None:
        return self._last_pod_snapshot

    @property
    def last_node_snapshot(self) -> dict[str, NodeReadyCondition] | None:
        return self._last_node_snapshot

    def pod_status(self) -> dict[str, PodPhase]:
        """Resolve each watched name and record its phase.

        A watched name is replaced by the first mirror key it prefixes, in the
        mirror's key order. When several keys share the prefix, which one wins
        is unspecified.

        Raises:
            StoreError: If a mirror lookup fails.
        """
        status: dict[str, PodPhase] = {}

        pod_names = self.pod_source.list_keys()
        for watched_pod in self.watch_pods:
            # Pod names are suffixed with generated data
            for name in pod_names:
                if name.startswith(watched_pod):
                    watched_pod = name
                    break

            pod, exists = self.pod_source.get_by_key(watched_pod)
            if not exists:
                status[watched_pod] = PodPhase.DOES_NOT_EXIST
                continue
            phase = pod.status.phase if pod.status else None
            status[watched_pod] = PodPhase.from_api(phase)

        return status

    def node_status(self) -> dict[str, NodeReadyCondition]:
        """Record the Ready condition of every mirrored node.

        Nodes that do not report a Ready condition are left out.
        """
        status: dict[str, NodeReadyCondition] = {}

        for node in self.node_source.list():
            conditions = (node.status.conditions if node.status else None) or []
            for condition in conditions:
                if condition.type == NODE_READY:
                    status[node.metadata.name] = NodeReadyCondition.from_api(condition)
                    break

        return status

    def report_pods(self, snapshot: dict[str, PodPhase]) -> bool:
        """Print pod lines if the snapshot changed, then remember it.

        Returns:
            True if the snapshot differed from the previous one.
        """
        changed = snapshot != self._last_pod_snapshot
        self._last_pod_snapshot = dict(snapshot)

        if changed:
            for name, phase in snapshot.items():
                self._output(f"\tPod Status:{name:>24}\t{phase}")
        return changed

    def report_nodes(self, snapshot: dict[str, NodeReadyCondition]) -> bool:
        """Print node lines if the snapshot changed, then remember it.

        Returns:
            True if the snapshot differed from the previous one.
        """
        changed = snapshot != self._last_node_snapshot
        self._last_node_snapshot = dict(snapshot)

        if changed:
            for name, condition in snapshot.items():
                self._output(f"\tNode Conditions:{name:>24}\t{condition}")
        return changed
