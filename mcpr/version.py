"""
Version Management

Name and version reported by the CLI and by the bridge's MCP handshake.
"""

# Version of the mcpr command-line tool
CLI_VERSION = "0.0.1"

# serverInfo sent back to MCP clients on initialize
SERVER_NAME = "MCP Router"
SERVER_VERSION = "0.0.2"


def get_current_version() -> dict:
    """
    Get current version info.

    Returns:
        Dict with cli version, server name and server version
    """
    return {
        "version": CLI_VERSION,
        "server_name": SERVER_NAME,
        "server_version": SERVER_VERSION,
    }
