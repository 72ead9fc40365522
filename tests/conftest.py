"""Shared test fixtures for bootwatch-cli tests.

This module provides builders for Kubernetes model objects and a fake
resource mirror backed by a real ObjectStore:
- make_pod / make_node: V1Pod and V1Node factories
- fake_mirror: in-memory stand-in for ResourceMirror
- cli_config_path: isolated ~/.bootwatch/config.yaml
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any
from unittest.mock import patch

import pytest
from kubernetes import client

from bootwatch_cli.status import ObjectStore

# =============================================================================
# Kubernetes object builders
# =============================================================================


def build_pod(
    name: str,
    phase: str | None = "Running",
    namespace: str | None = None,
    resource_version: str = "1",
) -> client.V1Pod:
    return client.V1Pod(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=namespace,
            resource_version=resource_version,
        ),
        status=client.V1PodStatus(phase=phase),
    )


def build_node(
    name: str,
    ready: str | None = "True",
    reason: str | None = None,
    extra_conditions: Iterable[tuple[str, str]] = (),
    resource_version: str = "1",
) -> client.V1Node:
    conditions = [
        client.V1NodeCondition(type=cond_type, status=cond_status)
        for cond_type, cond_status in extra_conditions
    ]
    if ready is not None:
        conditions.append(client.V1NodeCondition(type="Ready", status=ready, reason=reason))
    return client.V1Node(
        metadata=client.V1ObjectMeta(name=name, resource_version=resource_version),
        status=client.V1NodeStatus(conditions=conditions),
    )


@pytest.fixture
def make_pod():
    """Factory for V1Pod objects."""
    return build_pod


@pytest.fixture
def make_node():
    """Factory for V1Node objects."""
    return build_node


# =============================================================================
# Fake mirror
# =============================================================================


class FakeMirror:
    """ResourceMirror stand-in holding a fixed set of objects."""

    def __init__(self, objects: Iterable[Any] = ()):
        self.store = ObjectStore()
        self.store.replace(objects)
        self.started_with: threading.Event | None = None
        self.stopped = False

    def start(self, stop_event: threading.Event) -> None:
        self.started_with = stop_event

    def stop(self) -> None:
        self.stopped = True

    def wait_for_sync(self, timeout: float | None = None) -> bool:
        return True

    def list_keys(self) -> list[str]:
        return self.store.list_keys()

    def get_by_key(self, key: str) -> tuple[Any | None, bool]:
        return self.store.get_by_key(key)

    def list(self) -> list[Any]:
        return self.store.list()


@pytest.fixture
def fake_mirror():
    """Factory for FakeMirror instances."""
    return FakeMirror


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by configure_logging during CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# Config isolation
# =============================================================================


@pytest.fixture
def cli_config_path(tmp_path, monkeypatch):
    """Point the CLI config file at a temporary location."""
    for env_var in (
        "BOOTWATCH_KUBECONFIG",
        "BOOTWATCH_CONTEXT",
        "BOOTWATCH_TIMEOUT",
        "BOOTWATCH_INTERVAL",
        "BOOTWATCH_PODS",
        "BOOTWATCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(env_var, raising=False)

    config_file = tmp_path / ".bootwatch" / "config.yaml"
    with patch("bootwatch_cli.config.get_config_path", return_value=config_file):
        yield config_file
