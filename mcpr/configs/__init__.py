"""
mcpr Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from mcpr.configs.logging import get_logger, setup_logging

# Paths
from mcpr.configs.paths import get_data_path

# Constants
from mcpr.configs.constants import (
    CLIENT_NAME_HEADER,
    DEFAULT_HOST,
    DEFAULT_PORT,
    TIMEOUTS,
    TOKEN_HEADER,
    get_timeout,
)

# YAML config
from mcpr.configs.yaml_config import (
    get_config_path,
    load_yaml_config,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Paths
    "get_data_path",
    # Constants
    "CLIENT_NAME_HEADER",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "TIMEOUTS",
    "TOKEN_HEADER",
    "get_timeout",
    # YAML config
    "get_config_path",
    "load_yaml_config",
]
