"""
mcpr - Command-line tool for Model Context Protocol Router

Commands:
  connect  - Serve MCP over stdio, backed by the MCP Router HTTP server
  version  - Print the mcpr version
  help     - Print usage

Environment variables:
    MCPR_HOST / MCPR_PORT / MCPR_TOKEN: Connection defaults for connect
    MCPR_DEBUG: Enable debug logging (default: false)
    MCPR_LOG_FILE: Log file path (default: $MCPR_DATA_PATH/mcpr.log)
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Optional, Sequence

from mcpr.configs import DEFAULT_HOST, DEFAULT_PORT, get_logger, setup_logging
from mcpr.controllers.bridge import BridgeServer, ConnectionOptions, resolve_options
from mcpr.exceptions import BridgeStartupError, ConfigurationError
from mcpr.version import get_current_version

logger = get_logger("cli")

HELP_TEXT = f"""
MCP Router CLI (mcpr) - Command-line tool for Model Context Protocol Router

Usage:
  mcpr [command] [options]

Commands:
  connect     Connect to an existing MCP HTTP Server running in the MCP Router application
    Options:
      --host <hostname>  Specify the host (default: {DEFAULT_HOST})
      --port <port>      Specify the port (default: {DEFAULT_PORT})
      --token, -t <tok>  Access token sent as X-MCP-Token
      --debug            Enable debug logging

  version     Display the current version of mcpr
  help        Display this help information

Examples:
  mcpr connect                       Connect to the local MCP HTTP Server
  mcpr connect --port 8080           Connect to the local MCP HTTP Server on port 8080
  mcpr connect --host api.example.com --port 3030  Connect to a remote MCP HTTP Server
  mcpr version                       Show version information
  mcpr help                          Display this help information
"""


def build_connect_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mcpr connect", description="MCP Router stdio bridge")
    parser.add_argument("--host", default=None, help=f"Remote host (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=None, help=f"Remote port (default: {DEFAULT_PORT})")
    parser.add_argument("--token", "-t", default=None, help="Access token sent as X-MCP-Token")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


async def shutdown(bridge: BridgeServer) -> None:
    """
    Stop the bridge, then end the process.

    stdio_server reads stdin from a worker thread that cancellation cannot
    interrupt, so waiting for run() to return would hang until the parent
    closes the pipe.
    """
    await bridge.stop()
    logger.info("MCP Bridge Server terminated by signal")
    sys.stdout.flush()
    logging.shutdown()
    os._exit(0)


async def run_bridge(options: ConnectionOptions) -> None:
    """Run the bridge until stdin closes or SIGINT/SIGTERM arrives."""
    bridge = BridgeServer(options)
    shutdown_tasks: set[asyncio.Task] = set()

    def on_signal() -> None:
        task = loop.create_task(shutdown(bridge))
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, on_signal)
        except NotImplementedError:
            # Windows event loops have no signal handlers; KeyboardInterrupt still works
            pass

    await bridge.run()


def execute_connect(args: Sequence[str]) -> int:
    """
    Execute the connect command.

    Returns:
        Process exit status
    """
    parsed = build_connect_parser().parse_args(list(args))
    setup_logging(debug=True if parsed.debug else None)

    try:
        options = resolve_options(host=parsed.host, port=parsed.port, token=parsed.token)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"MCP Bridge starting, remote URL: {options.base_url}")
    try:
        asyncio.run(run_bridge(options))
    except BridgeStartupError:
        # Diagnostics and hints were already logged by the bridge
        return 1
    except KeyboardInterrupt:
        logger.info("Bridge interrupted")
    except Exception as e:
        logger.error(f"Bridge error: {e}")
        return 1
    return 0


def execute_version() -> int:
    print(get_current_version()["version"])
    return 0


def execute_help() -> int:
    print(HELP_TEXT)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the mcpr console script."""
    args = list(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else "help"

    if command == "connect":
        return execute_connect(args[1:])
    if command == "version":
        return execute_version()
    return execute_help()


if __name__ == "__main__":
    sys.exit(main())
