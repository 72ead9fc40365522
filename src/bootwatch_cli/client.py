"""Cluster connection for bootwatch-cli."""

from __future__ import annotations

from pathlib import Path

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from .errors import ClusterConnectionError
from .shared.logging import get_logger

logger = get_logger(__name__)


def load_core_api(
    kubeconfig: str | None = None,
    context: str | None = None,
) -> client.CoreV1Api:
    """Build a CoreV1Api client.

    An explicit kubeconfig is loaded as given. Without one, the in-cluster
    service account is tried first, then the default kubeconfig.

    Args:
        kubeconfig: Path to a kubeconfig file.
        context: Kubeconfig context to use.

    Returns:
        Configured CoreV1Api.

    Raises:
        ClusterConnectionError: If no usable configuration was found.
    """
    if kubeconfig:
        if not Path(kubeconfig).expanduser().exists():
            raise ClusterConnectionError(f"Kubeconfig not found: {kubeconfig}")
        try:
            config.load_kube_config(
                config_file=str(Path(kubeconfig).expanduser()), context=context
            )
        except ConfigException as e:
            raise ClusterConnectionError(f"Invalid kubeconfig {kubeconfig}: {e}") from e
        logger.info("Loaded kubeconfig", path=kubeconfig, context=context)
        return client.CoreV1Api()

    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except ConfigException:
        try:
            config.load_kube_config(context=context)
            logger.info("Loaded default kubeconfig", context=context)
        except ConfigException as e:
            raise ClusterConnectionError(f"Failed to configure Kubernetes client: {e}") from e
    return client.CoreV1Api()
