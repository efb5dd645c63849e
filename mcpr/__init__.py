"""
mcpr - MCP Router CLI.

Bridges an MCP client speaking stdio to the MCP Router HTTP application.
"""

from mcpr.version import CLI_VERSION

__version__ = CLI_VERSION
