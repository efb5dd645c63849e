"""
HTTP client for the MCP Router application.

Each logical MCP operation maps to exactly one HTTP request. A fresh
httpx.AsyncClient is opened per call; nothing is pooled or cached.

Endpoints:
    GET  /api/test                          liveness probe
    GET  /api/tools                         list tools
    POST /api/tool-by-name/{name}           call tool (body = JSON args)
    GET  /api/resources                     list resources
    GET  /api/resource?serverName=&path=    read resource
    GET  /api/prompts                       list prompts
    POST /api/prompt/{name}                 get prompt (body = JSON args)
"""

import asyncio
import json
import re
from typing import Any, Optional
from urllib.parse import quote

import httpx

from mcpr.configs import CLIENT_NAME_HEADER, TOKEN_HEADER, get_logger, get_timeout
from mcpr.exceptions import (
    InvalidResourceUriError,
    RemoteConnectionError,
    RemoteStatusError,
    RemoteTimeoutError,
    ResponseParseError,
)

logger = get_logger("client")

# resource://<serverName>/<path>
RESOURCE_URI_PATTERN = re.compile(r"resource://([^/]+)/(.+)")


def _encode(value: str) -> str:
    """Percent-encode a single path segment or query value."""
    return quote(value, safe="")


class RemoteClient:
    """
    Async HTTP client for the MCP Router API.

    Usage:
        client = RemoteClient("http://localhost:3282", token="secret")
        client.set_client_info("claude-desktop")
        tools = await client.list_tools()
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout if timeout is not None else get_timeout("http_default")
        self._transport = transport
        self._client_name: Optional[str] = None

    @property
    def client_name(self) -> Optional[str]:
        return self._client_name

    def set_client_info(self, name: str) -> None:
        """Record the MCP client name sent as X-MCP-Client-Name on later calls."""
        self._client_name = name

    def headers(self) -> dict[str, str]:
        """Common headers: content type, client name and token when known."""
        headers = {"Content-Type": "application/json"}
        if self._client_name:
            headers[CLIENT_NAME_HEADER] = self._client_name
        if self._token:
            headers[TOKEN_HEADER] = self._token
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Optional[str] = None,
    ) -> httpx.Response:
        """Issue one request, mapping transport failures onto RemoteError types."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, url, headers=headers, content=body)
        except httpx.ConnectError as e:
            raise RemoteConnectionError(
                f"Connection refused at {self.base_url}. Make sure the MCP Router "
                "application is running and the HTTP server is enabled."
            ) from e
        except httpx.TimeoutException as e:
            raise RemoteTimeoutError(f"Request timed out: {url}") from e
        except httpx.HTTPError as e:
            raise RemoteConnectionError(f"Failed to connect to {self.base_url}: {e}") from e

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        body: Optional[str] = None,
    ) -> Any:
        """Make an API request and return the parsed JSON body."""
        logger.debug(f"{method} {path}")
        response = await self._send(method, path, self.headers(), body=body)

        if response.is_error:
            raise RemoteStatusError(
                f"Failed to {operation}: {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Invalid JSON response from {path}") from e

    async def probe(self, timeout: Optional[float] = None) -> Any:
        """
        Check that the MCP Router HTTP server is up.

        The whole call is cancelled if it runs past `timeout` seconds. httpx
        itself is left unbounded so the deadline is reported one way only.

        Returns:
            Parsed /api/test body

        Raises:
            RemoteConnectionError: Nothing is listening at base_url
            RemoteTimeoutError: No answer within the timeout
            RemoteStatusError: Non-success status
            ResponseParseError: Body is not JSON
        """
        if timeout is None:
            timeout = get_timeout("probe")

        # Only the token is sent; the client is not identified yet
        headers = {TOKEN_HEADER: self._token} if self._token else {}

        try:
            response = await asyncio.wait_for(
                self._send("GET", "/api/test", headers),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise RemoteTimeoutError(
                f"Connection timed out after {timeout:g} seconds. "
                f"The server at {self.base_url} is not responding."
            ) from e

        if response.is_error:
            reason = f" ({response.reason_phrase})" if response.reason_phrase else ""
            raise RemoteStatusError(
                f"Server responded with status: {response.status_code}{reason}",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(
                "Failed to parse server response as JSON. Server may not be fully initialized."
            ) from e

    async def list_tools(self) -> dict:
        """List all tools across the router's servers."""
        return await self._request("GET", "/api/tools", "list tools")

    async def call_tool(self, name: str, args: Any = None) -> Any:
        """
        Call a tool by its full name.

        Args:
            name: Tool name, sent as one URL-encoded path segment
            args: Tool arguments (defaults to an empty mapping)
        """
        return await self._request(
            "POST",
            f"/api/tool-by-name/{_encode(name)}",
            f"call tool {name}",
            body=json.dumps(args if args is not None else {}),
        )

    async def list_resources(self) -> dict:
        """List all resources across the router's servers."""
        return await self._request("GET", "/api/resources", "list resources")

    async def read_resource(self, uri: str) -> Any:
        """
        Read a resource.

        Args:
            uri: Resource URI in the form resource://<serverName>/<path>

        Raises:
            InvalidResourceUriError: URI does not match; nothing is sent
        """
        match = RESOURCE_URI_PATTERN.fullmatch(uri)
        if not match:
            raise InvalidResourceUriError(uri)

        server_name, path = match.groups()
        return await self._request(
            "GET",
            f"/api/resource?serverName={_encode(server_name)}&path={_encode(path)}",
            f"read resource {uri}",
        )

    async def list_prompts(self) -> dict:
        """List all prompts across the router's servers."""
        return await self._request("GET", "/api/prompts", "list prompts")

    async def get_prompt(self, name: str, args: Any = None) -> Any:
        """
        Get a prompt by its full name (e.g. "serverName_promptName", not split).

        Args:
            name: Prompt name, sent as one URL-encoded path segment
            args: Prompt arguments (defaults to an empty mapping)
        """
        return await self._request(
            "POST",
            f"/api/prompt/{_encode(name)}",
            f"get prompt {name}",
            body=json.dumps(args if args is not None else {}),
        )
