"""Status controller: the readiness predicate over the pod and node mirrors."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import click

from ..shared.logging import get_logger
from .mirror import ResourceMirror
from .projector import NodeReadyCondition, PodPhase, StatusProjector


class Readiness(Enum):
    """Outcome of a single evaluation."""

    READY = "ready"
    NOT_READY = "not_ready"
    TRANSIENT_ERROR = "transient_error"  # Store or API failure, retried next tick


@dataclass
class ReadinessResult:
    """Result of a readiness evaluation."""

    readiness: Readiness
    reason: str = ""

    @property
    def ready(self) -> bool:
        return self.readiness == Readiness.READY


class StatusController:
    """Tracks watched pods and cluster nodes until the control plane converges.

    Pods are evaluated first; nodes are only looked at once every watched pod
    is running. Store errors are logged and reported as not ready, so the
    predicate can be polled cheaply and never fails hard.
    """

    def __init__(
        self,
        pod_mirror: Any,
        node_mirror: Any,
        watch_pods: Iterable[str],
        output: Callable[[str], None] = click.echo,
        logger: Any = None,
    ):
        """Initialize the controller.

        Args:
            pod_mirror: Mirror of pods across all namespaces.
            node_mirror: Mirror of cluster nodes.
            watch_pods: Pod name prefixes that must reach Running.
            output: Sink for user-facing status lines.
            logger: structlog-style logger receiving transient errors.
        """
        self.pod_mirror = pod_mirror
        self.node_mirror = node_mirror
        self.projector = StatusProjector(pod_mirror, node_mirror, watch_pods, output)
        self._logger = logger or get_logger(__name__)
        self._stop_event = threading.Event()

    @classmethod
    def from_api(
        cls,
        core_api: Any,
        watch_pods: Iterable[str],
        output: Callable[[str], None] = click.echo,
        logger: Any = None,
    ) -> StatusController:
        """Build a controller with pod and node mirrors backed by a CoreV1Api."""
        pod_mirror = ResourceMirror("pods", core_api.list_pod_for_all_namespaces)
        node_mirror = ResourceMirror("nodes", core_api.list_node)
        return cls(pod_mirror, node_mirror, watch_pods, output=output, logger=logger)

    @property
    def watch_pods(self) -> tuple[str, ...]:
        return self.projector.watch_pods

    def run(self, stop_event: threading.Event | None = None) -> None:
        """Start both mirrors on a shared stop event."""
        if stop_event is not None:
            self._stop_event = stop_event
        self.pod_mirror.start(self._stop_event)
        self.node_mirror.start(self._stop_event)

    def stop(self) -> None:
        """Signal both mirrors to stop and abort their watches."""
        self._stop_event.set()
        self.pod_mirror.stop()
        self.node_mirror.stop()

    def wait_for_sync(self, timeout: float) -> bool:
        """Wait until both mirrors completed their initial list."""
        deadline = time.monotonic() + timeout
        if not self.pod_mirror.wait_for_sync(timeout):
            return False
        return self.node_mirror.wait_for_sync(max(0.0, deadline - time.monotonic()))

    def pod_status(self) -> dict[str, PodPhase]:
        return self.projector.pod_status()

    def node_status(self) -> dict[str, NodeReadyCondition]:
        return self.projector.node_status()

    def evaluate(self) -> ReadinessResult:
        """Evaluate pod readiness, then node readiness if all pods run."""
        result = self._pods_readiness()
        if not result.ready:
            return result
        return self._nodes_readiness()

    def all_running(self) -> bool:
        """Whether all watched pods are running and all nodes are ready."""
        return self.evaluate().ready

    def _pods_readiness(self) -> ReadinessResult:
        try:
            snapshot = self.projector.pod_status()
        except Exception as e:
            self._logger.info("Error retrieving pod statuses", error=str(e))
            return ReadinessResult(Readiness.TRANSIENT_ERROR, f"pod status unavailable: {e}")

        self.projector.report_pods(snapshot)

        waiting = [name for name, phase in snapshot.items() if phase != PodPhase.RUNNING]
        if waiting:
            return ReadinessResult(Readiness.NOT_READY, f"pods not running: {', '.join(waiting)}")
        return ReadinessResult(Readiness.READY)

    def _nodes_readiness(self) -> ReadinessResult:
        try:
            snapshot = self.projector.node_status()
        except Exception as e:
            self._logger.info("Error retrieving node conditions", error=str(e))
            return ReadinessResult(Readiness.TRANSIENT_ERROR, f"node status unavailable: {e}")

        self.projector.report_nodes(snapshot)

        not_ready = [name for name, condition in snapshot.items() if not condition.ready]
        if not_ready:
            return ReadinessResult(Readiness.NOT_READY, f"nodes not ready: {', '.join(not_ready)}")
        return ReadinessResult(Readiness.READY)
