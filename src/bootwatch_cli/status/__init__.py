"""Control plane status tracking.

This package watches pods and nodes of a bootstrapping cluster and decides
whether the self-hosted control plane has converged:
1. Mirrors pods and nodes with list+watch
2. Projects them to pod phases and node Ready conditions
3. Evaluates readiness (pods first, then nodes)
4. Polls the evaluation until it holds or a deadline elapses
"""

from .controller import Readiness, ReadinessResult, StatusController
from .mirror import ResourceMirror
from .poller import PollResult, StatusPoller, wait_until_pods_running
from .projector import NodeReadyCondition, PodPhase, StatusProjector
from .store import ObjectStore, object_key

__all__ = [
    # Mirroring
    "ObjectStore",
    "object_key",
    "ResourceMirror",
    # Projection
    "PodPhase",
    "NodeReadyCondition",
    "StatusProjector",
    # Evaluation
    "Readiness",
    "ReadinessResult",
    "StatusController",
    # Polling
    "PollResult",
    "StatusPoller",
    "wait_until_pods_running",
]
