"""
mcpr Constants

Static configuration values that rarely change: remote defaults,
HTTP header names and timeout configuration.
"""

# --- Remote Defaults ---

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3282

# --- HTTP Headers ---

CLIENT_NAME_HEADER = "X-MCP-Client-Name"
TOKEN_HEADER = "X-MCP-Token"

# --- Timeout Configuration ---
# Centralized timeout values (in seconds)

TIMEOUTS = {
    "probe": 5,  # Liveness probe against /api/test
    "http_default": None,  # Operation calls are not bounded once serving
}


def get_timeout(key: str, default: int | float | None = None) -> int | float | None:
    """
    Get a timeout value by key.

    Args:
        key: Timeout key from TIMEOUTS dict
        default: Default value if key not found

    Returns:
        Timeout value in seconds, or None for no timeout
    """
    return TIMEOUTS.get(key, default)
