"""Unit tests for CLI configuration."""

from __future__ import annotations

import pytest
import yaml

from bootwatch_cli.config import (
    DEFAULT_PODS,
    DEFAULT_TIMEOUT,
    CLIConfig,
    load_config,
    parse_pods,
    save_config,
    unset_config,
)


class TestCLIConfig:
    """Tests for CLIConfig dataclass."""

    def test_default_values(self):
        """Test default configuration values."""
        config = CLIConfig()
        assert config.kubeconfig is None
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.interval == 5.0
        assert config.pods == list(DEFAULT_PODS)
        assert config.get_source("timeout") == "default"

    def test_to_dict(self):
        """to_dict drops source tracking."""
        data = CLIConfig(timeout=60).to_dict()
        assert data["timeout"] == 60
        assert "_sources" not in data


class TestParsePods:
    """Tests for parse_pods."""

    def test_comma_separated(self):
        assert parse_pods("kube-system/etcd, kube-system/kube-apiserver,") == [
            "kube-system/etcd",
            "kube-system/kube-apiserver",
        ]

    def test_list(self):
        assert parse_pods(["etcd", " api "]) == ["etcd", "api"]


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_without_file(self, cli_config_path):
        """No file and no environment gives defaults."""
        config = load_config()
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.get_source("pods") == "default"

    def test_config_file(self, cli_config_path):
        """Values from the config file override defaults."""
        cli_config_path.parent.mkdir(parents=True)
        cli_config_path.write_text(
            "timeout: 60\npods:\n  - kube-system/etcd\nkubeconfig: /tmp/kubeconfig\n"
        )

        config = load_config()

        assert config.timeout == 60
        assert config.pods == ["kube-system/etcd"]
        assert config.kubeconfig == "/tmp/kubeconfig"
        assert config.get_source("timeout") == "config file"

    def test_environment_overrides_file(self, cli_config_path, monkeypatch):
        """Environment variables win over the config file."""
        cli_config_path.parent.mkdir(parents=True)
        cli_config_path.write_text("timeout: 60\n")
        monkeypatch.setenv("BOOTWATCH_TIMEOUT", "90")
        monkeypatch.setenv("BOOTWATCH_PODS", "etcd,kube-apiserver")

        config = load_config()

        assert config.timeout == 90
        assert config.pods == ["etcd", "kube-apiserver"]
        assert config.get_source("timeout") == "environment"

    def test_invalid_values_ignored(self, cli_config_path, monkeypatch):
        """Values that cannot be converted fall back to lower precedence."""
        cli_config_path.parent.mkdir(parents=True)
        cli_config_path.write_text("timeout: soon\n")
        monkeypatch.setenv("BOOTWATCH_INTERVAL", "often")

        config = load_config()

        assert config.timeout == DEFAULT_TIMEOUT
        assert config.interval == 5.0

    def test_unreadable_file_ignored(self, cli_config_path):
        """A malformed config file falls back to defaults."""
        cli_config_path.parent.mkdir(parents=True)
        cli_config_path.write_text("timeout: [unclosed\n")

        assert load_config().timeout == DEFAULT_TIMEOUT


class TestSaveConfig:
    """Tests for save_config and unset_config."""

    def test_save_creates_file(self, cli_config_path):
        """Saving writes a converted value."""
        save_config("timeout", "300")
        save_config("pods", "etcd,kube-apiserver")

        data = yaml.safe_load(cli_config_path.read_text())
        assert data == {"timeout": 300, "pods": ["etcd", "kube-apiserver"]}

    def test_save_unknown_key(self, cli_config_path):
        with pytest.raises(KeyError):
            save_config("colour", "blue")

    def test_save_invalid_value(self, cli_config_path):
        with pytest.raises(ValueError):
            save_config("timeout", "soon")

    def test_unset(self, cli_config_path):
        """Unsetting removes only the given key."""
        save_config("timeout", "300")
        save_config("context", "bootstrap")

        assert unset_config("timeout") is True
        assert unset_config("timeout") is False
        assert yaml.safe_load(cli_config_path.read_text()) == {"context": "bootstrap"}

    def test_unset_without_file(self, cli_config_path):
        assert unset_config("timeout") is False
