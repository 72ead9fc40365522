"""Unit tests for cluster client construction."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from kubernetes.config.config_exception import ConfigException

from bootwatch_cli.client import load_core_api
from bootwatch_cli.errors import ClusterConnectionError


class TestLoadCoreApi:
    """Tests for load_core_api."""

    def test_explicit_kubeconfig(self, tmp_path):
        """An explicit kubeconfig is loaded with the given context."""
        kubeconfig = tmp_path / "kubeconfig"
        kubeconfig.write_text("apiVersion: v1\nkind: Config\n")

        with (
            patch("bootwatch_cli.client.config") as mock_config,
            patch("bootwatch_cli.client.client.CoreV1Api") as mock_api,
        ):
            api = load_core_api(str(kubeconfig), context="bootstrap")

        mock_config.load_kube_config.assert_called_once_with(
            config_file=str(kubeconfig), context="bootstrap"
        )
        mock_config.load_incluster_config.assert_not_called()
        assert api is mock_api.return_value

    def test_missing_kubeconfig(self, tmp_path):
        """A kubeconfig path that does not exist fails before loading."""
        with pytest.raises(ClusterConnectionError) as exc_info:
            load_core_api(str(tmp_path / "nope"))
        assert "not found" in str(exc_info.value)

    def test_invalid_kubeconfig(self, tmp_path):
        """A kubeconfig the client rejects is a connection error."""
        kubeconfig = tmp_path / "kubeconfig"
        kubeconfig.write_text("garbage")

        with patch(
            "bootwatch_cli.client.config.load_kube_config",
            side_effect=ConfigException("Invalid kube-config file"),
        ):
            with pytest.raises(ClusterConnectionError):
                load_core_api(str(kubeconfig))

    def test_in_cluster(self):
        """Without a kubeconfig the in-cluster config is tried first."""
        with (
            patch("bootwatch_cli.client.config.load_incluster_config") as mock_incluster,
            patch("bootwatch_cli.client.config.load_kube_config") as mock_kube,
            patch("bootwatch_cli.client.client.CoreV1Api"),
        ):
            load_core_api()

        mock_incluster.assert_called_once()
        mock_kube.assert_not_called()

    def test_falls_back_to_default_kubeconfig(self):
        """Outside a cluster the default kubeconfig is used."""
        with (
            patch(
                "bootwatch_cli.client.config.load_incluster_config",
                side_effect=ConfigException("not in cluster"),
            ),
            patch("bootwatch_cli.client.config.load_kube_config") as mock_kube,
            patch("bootwatch_cli.client.client.CoreV1Api"),
        ):
            load_core_api(context="admin")

        mock_kube.assert_called_once_with(context="admin")

    def test_no_configuration(self):
        """No in-cluster config and no kubeconfig is a connection error."""
        with (
            patch(
                "bootwatch_cli.client.config.load_incluster_config",
                side_effect=ConfigException("not in cluster"),
            ),
            patch(
                "bootwatch_cli.client.config.load_kube_config",
                side_effect=ConfigException("No configuration found"),
            ),
        ):
            with pytest.raises(ClusterConnectionError):
                load_core_api()
