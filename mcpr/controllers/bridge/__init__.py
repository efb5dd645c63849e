"""
MCP Stdio-to-HTTP Bridge

Serves MCP over stdio to the parent process and forwards tools, resources
and prompts to the MCP Router HTTP application.
"""

from mcpr.controllers.bridge.client import RemoteClient
from mcpr.controllers.bridge.options import ConnectionOptions, resolve_options
from mcpr.controllers.bridge.server import BridgeServer, BridgeState

__all__ = [
    "BridgeServer",
    "BridgeState",
    "ConnectionOptions",
    "RemoteClient",
    "resolve_options",
]
