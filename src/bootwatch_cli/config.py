"""CLI configuration management.

Handles persistent CLI configuration stored in ~/.bootwatch/config.yaml.
Supports environment variable overrides and CLI flag precedence.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Default values
DEFAULT_PODS = (
    "kube-system/pod-checkpointer",
    "kube-system/kube-apiserver",
    "kube-system/kube-scheduler",
    "kube-system/kube-controller-manager",
)
DEFAULT_TIMEOUT = 1200
DEFAULT_INTERVAL = 5.0
DEFAULT_LOG_LEVEL = "warning"

CONFIG_KEYS = ("kubeconfig", "context", "timeout", "interval", "pods", "log_level")

# Environment variable mappings
ENV_VARS = {
    "kubeconfig": "BOOTWATCH_KUBECONFIG",
    "context": "BOOTWATCH_CONTEXT",
    "timeout": "BOOTWATCH_TIMEOUT",
    "interval": "BOOTWATCH_INTERVAL",
    "pods": "BOOTWATCH_PODS",
    "log_level": "BOOTWATCH_LOG_LEVEL",
}


@dataclass
class CLIConfig:
    """CLI configuration."""

    kubeconfig: str | None = None
    context: str | None = None
    timeout: int = DEFAULT_TIMEOUT
    interval: float = DEFAULT_INTERVAL
    pods: list[str] = field(default_factory=lambda: list(DEFAULT_PODS))
    log_level: str = DEFAULT_LOG_LEVEL

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def to_dict(self) -> dict[str, Any]:
        """Config values without source tracking."""
        return {key: getattr(self, key) for key in CONFIG_KEYS}


def get_config_path() -> Path:
    """Get the CLI config file path.

    Returns:
        Path to ~/.bootwatch/config.yaml
    """
    return Path.home() / ".bootwatch" / "config.yaml"


def parse_pods(value: Any) -> list[str]:
    """Parse a pod list from a YAML list or a comma separated string."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return [item.strip() for item in items if item.strip()]


def _coerce(key: str, value: Any) -> Any:
    if key == "timeout":
        return int(value)
    if key == "interval":
        return float(value)
    if key == "pods":
        return parse_pods(value)
    return str(value)


def load_config() -> CLIConfig:
    """Load CLI configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file (~/.bootwatch/config.yaml)
    3. Defaults

    CLI flags are applied on top by the commands themselves.

    Returns:
        CLIConfig with values and sources
    """
    config = CLIConfig()
    sources: dict[str, str] = {key: "default" for key in CONFIG_KEYS}

    # Load from config file
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            file_config = {}  # Unreadable config file, use defaults

        for key in CONFIG_KEYS:
            if file_config.get(key) is None:
                continue
            try:
                setattr(config, key, _coerce(key, file_config[key]))
                sources[key] = "config file"
            except (TypeError, ValueError):
                pass

    # Override with environment variables
    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, _coerce(key, raw))
            sources[key] = "environment"
        except ValueError:
            pass

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key (one of CONFIG_KEYS)
        value: Value to save

    Raises:
        KeyError: If key is not a known config key
        ValueError: If value cannot be converted for key
    """
    if key not in CONFIG_KEYS:
        raise KeyError(key)
    value = _coerce(key, value)

    config_path = get_config_path()

    # Load existing config
    existing: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                existing = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            pass

    existing[key] = value

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(existing, f, default_flow_style=False)


def unset_config(key: str) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove

    Returns:
        True if key was removed, False if not found
    """
    config_path = get_config_path()
    if not config_path.exists():
        return False

    try:
        with open(config_path) as f:
            existing = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return False

    if key not in existing:
        return False

    del existing[key]

    with open(config_path, "w") as f:
        yaml.safe_dump(existing, f, default_flow_style=False)

    return True
