"""Error types for bootwatch-cli.

Only setup failures and the overall wait timeout reach the caller. Store
and API failures during an evaluation are absorbed by the controller.
"""

from dataclasses import dataclass


@dataclass
class BootwatchError(Exception):
    """Base error class for bootwatch errors."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ClusterConnectionError(BootwatchError):
    """Cluster client could not be built (bad or missing kubeconfig)."""

    message: str = "Failed to configure Kubernetes client"


@dataclass
class StoreError(BootwatchError):
    """Lookup in a mirror's object store failed."""

    message: str = "Object store access failed"


@dataclass
class PollTimeoutError(BootwatchError):
    """Polling deadline elapsed before the condition held."""

    message: str = "timed out waiting for the condition"
    timeout_seconds: float = 0.0
    attempts: int = 0


@dataclass
class WaitError(BootwatchError):
    """Waiting for the control plane failed; surfaced to the top-level caller."""

    message: str = "error while checking pod status"
