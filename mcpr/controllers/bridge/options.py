"""
Connection Options

Where the MCP Router HTTP application lives and how to authenticate.
Resolved once at startup and never changed afterwards.

Priority (highest first):
1. CLI flags (--host, --port, --token)
2. MCPR_HOST / MCPR_PORT / MCPR_TOKEN env vars
3. host / port / token in ~/.mcpr/config.yaml
4. Defaults: localhost:3282, no token
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from mcpr.configs import DEFAULT_HOST, DEFAULT_PORT, load_yaml_config
from mcpr.exceptions import ConfigurationError


@dataclass(frozen=True)
class ConnectionOptions:
    """Remote host, port and optional access token."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    token: Optional[str] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def _parse_port(value: Any, source: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid port from {source}: {value!r}") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range from {source}: {port}")
    return port


def resolve_options(
    host: Optional[str] = None,
    port: Optional[int] = None,
    token: Optional[str] = None,
) -> ConnectionOptions:
    """
    Build ConnectionOptions from CLI values, env vars and config.yaml.

    Args:
        host: Host from the command line, if given
        port: Port from the command line, if given
        token: Access token from the command line, if given

    Returns:
        Immutable ConnectionOptions

    Raises:
        ConfigurationError: Port is not a valid integer, or config.yaml is malformed
    """
    yaml_config = load_yaml_config()

    if host is None:
        host = os.environ.get("MCPR_HOST") or yaml_config.get("host") or DEFAULT_HOST

    if port is None:
        env_port = os.environ.get("MCPR_PORT")
        if env_port:
            port = _parse_port(env_port, "MCPR_PORT")
        elif yaml_config.get("port") is not None:
            port = _parse_port(yaml_config["port"], "config.yaml")
        else:
            port = DEFAULT_PORT
    else:
        port = _parse_port(port, "--port")

    if token is None:
        token = os.environ.get("MCPR_TOKEN") or yaml_config.get("token") or None

    return ConnectionOptions(host=str(host), port=port, token=str(token) if token else None)
