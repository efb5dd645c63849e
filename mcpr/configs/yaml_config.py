"""
mcpr YAML Configuration

Loading for ~/.mcpr/config.yaml. Recognized keys: host, port, token.

Example:
    host: localhost
    port: 3282
    token: my-access-token
"""

from pathlib import Path

import yaml

from mcpr.configs.paths import get_data_path
from mcpr.exceptions import ConfigurationError


def get_config_path() -> Path:
    """Get the path to config.yaml."""
    return get_data_path() / "config.yaml"


def load_yaml_config() -> dict:
    """
    Load configuration from ~/.mcpr/config.yaml.

    Returns:
        Configuration dictionary (empty if file doesn't exist)

    Raises:
        ConfigurationError: File exists but is not a YAML mapping
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {config_path}")
    return data
