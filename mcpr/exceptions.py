"""
mcpr Exception Hierarchy

Centralized exception classes for structured error handling across the bridge.
All mcpr-specific exceptions inherit from McprError.

Usage:
    from mcpr.exceptions import RemoteError, RemoteStatusError

    try:
        await client.call_tool("echo", {"text": "hi"})
    except RemoteError as e:
        logger.error(f"Tool call failed: {e}")
"""


class McprError(Exception):
    """Base exception for all mcpr errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(McprError):
    """Error in mcpr configuration (CLI flags, env vars, config.yaml)."""

    pass


# =============================================================================
# Remote (HTTP) Errors
# =============================================================================


class RemoteError(McprError):
    """Base class for errors talking to the MCP Router HTTP application."""

    pass


class RemoteConnectionError(RemoteError):
    """Remote application is unreachable (connection refused, DNS, reset)."""

    pass


class RemoteTimeoutError(RemoteError):
    """Remote application did not answer in time."""

    pass


class RemoteStatusError(RemoteError):
    """Remote answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ResponseParseError(RemoteError):
    """Remote answered with a body that is not valid JSON."""

    pass


class InvalidResourceUriError(RemoteError):
    """Resource URI does not match resource://<serverName>/<path>."""

    def __init__(self, uri: str):
        super().__init__(f"Invalid resource URI: {uri}.")
        self.uri = uri


# =============================================================================
# Bridge Errors
# =============================================================================


class BridgeError(McprError):
    """Base class for bridge lifecycle errors."""

    pass


class BridgeStartupError(BridgeError):
    """Liveness probe failed; the bridge must not serve requests."""

    def __init__(self, message: str, cause: RemoteError | None = None):
        super().__init__(message)
        self.cause = cause


class BridgeStoppedError(BridgeError):
    """stop() was called before the bridge started serving."""

    pass
