"""
MCP Bridge Server

Serves MCP over stdio and answers every request by delegating to the
MCP Router HTTP application through RemoteClient.

Lifecycle:
    CREATED  -> start() probes GET /api/test (5s)
    PROBING  -> SERVING on success, BridgeStartupError on failure,
                BridgeStoppedError if stop() cancels the probe
    SERVING  -> serve() answers requests one at a time
    STOPPED  <- stop(), or the client closes stdin

Runtime failures never escape a handler: they come back to the MCP client
as INTERNAL_ERROR responses naming the failed operation and its target.
"""

import enum
from typing import Any, Awaitable, Callable, Optional, Union

import anyio
import mcp.types as types
from mcp.server.models import InitializationOptions
from mcp.server.session import ServerSession
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.shared.session import RequestResponder

from mcpr.configs import get_logger, get_timeout
from mcpr.controllers.bridge.client import RemoteClient
from mcpr.controllers.bridge.options import ConnectionOptions
from mcpr.exceptions import BridgeError, BridgeStartupError, BridgeStoppedError, RemoteError
from mcpr.version import SERVER_NAME, SERVER_VERSION

logger = get_logger("bridge")

HandlerResult = Union[types.ServerResult, types.Result]
Handler = Callable[[Any], Awaitable[HandlerResult]]

STARTUP_HINTS = (
    "Make sure the MCP Router application is running with the HTTP server enabled on port {port}",
    "If the port is different, specify it with --port option",
    "If authentication is required, provide an access token with --token option",
)


class BridgeState(enum.Enum):
    CREATED = "created"
    PROBING = "probing"
    SERVING = "serving"
    STOPPED = "stopped"


def _internal_error(message: str) -> McpError:
    return McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=message))


def _passthrough(payload: Any) -> types.Result:
    """Wrap a remote JSON object as an MCP result without reshaping it."""
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    return types.Result.model_validate(payload)


class BridgeSession(ServerSession):
    """
    ServerSession that hands the initialize request to the bridge.

    The stock session answers initialize on its own; routing it through the
    bridge lets the client name reach RemoteClient before any other call.
    """

    def __init__(self, read_stream, write_stream, init_options, dispatch):
        super().__init__(read_stream, write_stream, init_options)
        self._dispatch = dispatch

    async def _received_request(self, responder: RequestResponder) -> None:
        request = responder.request.root
        if isinstance(request, types.InitializeRequest):
            with responder:
                await responder.respond(await self._dispatch(request))
            return
        await super()._received_request(responder)


class BridgeServer:
    """
    Bridge between an MCP stdio client and the MCP Router HTTP API.

    Usage:
        bridge = BridgeServer(ConnectionOptions(port=3282))
        await bridge.run()
    """

    def __init__(
        self,
        options: ConnectionOptions,
        client: Optional[RemoteClient] = None,
    ):
        self.options = options
        self.client = client or RemoteClient(options.base_url, options.token)
        self._state = BridgeState.CREATED
        self._active_scope: Optional[anyio.CancelScope] = None
        self._handlers: dict[type, Handler] = {}
        self._register_handlers()

    @property
    def state(self) -> BridgeState:
        return self._state

    def register_handler(self, request_type: type, handler: Handler) -> None:
        """Register the coroutine that answers one MCP request type."""
        self._handlers[request_type] = handler

    def _register_handlers(self) -> None:
        self.register_handler(types.InitializeRequest, self._handle_initialize)
        self.register_handler(types.PingRequest, self._handle_ping)
        self.register_handler(types.ListToolsRequest, self._handle_list_tools)
        self.register_handler(types.CallToolRequest, self._handle_call_tool)
        self.register_handler(types.ListResourcesRequest, self._handle_list_resources)
        self.register_handler(types.ListResourceTemplatesRequest, self._handle_list_resource_templates)
        self.register_handler(types.ReadResourceRequest, self._handle_read_resource)
        self.register_handler(types.ListPromptsRequest, self._handle_list_prompts)
        self.register_handler(types.GetPromptRequest, self._handle_get_prompt)

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=SERVER_VERSION,
            capabilities=types.ServerCapabilities(tools=types.ToolsCapability()),
        )

    # --- Handlers ---

    async def _handle_initialize(self, request: types.InitializeRequest) -> HandlerResult:
        try:
            client_info = request.params.clientInfo
            if client_info is not None and client_info.name:
                logger.info(f"MCP client connected: {client_info.name}")
                self.client.set_client_info(client_info.name)
            return types.ServerResult(
                types.InitializeResult(
                    protocolVersion=request.params.protocolVersion,
                    capabilities=types.ServerCapabilities(tools=types.ToolsCapability()),
                    serverInfo=types.Implementation(name=SERVER_NAME, version=SERVER_VERSION),
                )
            )
        except Exception as e:
            raise _internal_error(f"Error during initialization: {e}") from e

    async def _handle_ping(self, request: types.PingRequest) -> HandlerResult:
        return types.ServerResult(types.EmptyResult())

    async def _handle_list_tools(self, request: types.ListToolsRequest) -> HandlerResult:
        try:
            response = await self.client.list_tools()
            return _passthrough({"tools": response.get("tools") or []})
        except Exception as e:
            raise _internal_error(f"Error listing tools: {e}") from e

    async def _handle_call_tool(self, request: types.CallToolRequest) -> HandlerResult:
        name = request.params.name
        try:
            result = await self.client.call_tool(name, request.params.arguments or {})
            return _passthrough(result)
        except Exception as e:
            raise _internal_error(f"Error calling tool {name}: {e}") from e

    async def _handle_list_resources(self, request: types.ListResourcesRequest) -> HandlerResult:
        try:
            response = await self.client.list_resources()
            return _passthrough({"resources": response.get("resources") or []})
        except Exception as e:
            raise _internal_error(f"Error listing resources: {e}") from e

    async def _handle_list_resource_templates(
        self, request: types.ListResourceTemplatesRequest
    ) -> HandlerResult:
        # The router has no notion of resource templates
        return types.ServerResult(types.ListResourceTemplatesResult(resourceTemplates=[]))

    async def _handle_read_resource(self, request: types.ReadResourceRequest) -> HandlerResult:
        uri = str(request.params.uri)
        try:
            result = await self.client.read_resource(uri)
            return _passthrough(result)
        except Exception as e:
            raise _internal_error(f"Error reading resource {uri}: {e}") from e

    async def _handle_list_prompts(self, request: types.ListPromptsRequest) -> HandlerResult:
        try:
            response = await self.client.list_prompts()
            return _passthrough({"prompts": response.get("prompts") or []})
        except Exception as e:
            raise _internal_error(f"Error listing prompts: {e}") from e

    async def _handle_get_prompt(self, request: types.GetPromptRequest) -> HandlerResult:
        name = request.params.name
        try:
            result = await self.client.get_prompt(name, request.params.arguments or {})
            return _passthrough(result)
        except Exception as e:
            raise _internal_error(f"Error getting prompt {name}: {e}") from e

    # --- Dispatch ---

    async def dispatch(self, request: Any) -> Union[HandlerResult, types.ErrorData]:
        """
        Answer one MCP request.

        Returns:
            The handler's result, or ErrorData if the handler failed or
            the request type has no handler
        """
        handler = self._handlers.get(type(request))
        if handler is None:
            logger.warning(f"Unknown method: {request.method}")
            return types.ErrorData(
                code=types.METHOD_NOT_FOUND,
                message=f"Method not found: {request.method}",
            )

        logger.debug(f"Received: {request.method}")
        try:
            return await handler(request)
        except McpError as e:
            logger.error(f"[MCP Bridge Error] {e.error.message}")
            return e.error

    async def _dispatch_loop(self, session: ServerSession) -> None:
        # One request at a time: the next message waits for the current handler
        async for message in session.incoming_messages:
            if isinstance(message, RequestResponder):
                with message:
                    await message.respond(await self.dispatch(message.request.root))
            elif isinstance(message, Exception):
                logger.error(f"[MCP Bridge Error] {message}")
            else:
                logger.debug(f"Received notification: {message.root.method}")

    # --- Lifecycle ---

    async def start(self, timeout: Optional[float] = None) -> None:
        """
        Probe the MCP Router before accepting MCP traffic.

        Args:
            timeout: Probe deadline in seconds (default: 5)

        Raises:
            BridgeStartupError: Remote unreachable, too slow, erroring or not JSON
            BridgeStoppedError: stop() was called while the probe was in flight
        """
        if self._state is not BridgeState.CREATED:
            raise BridgeError(f"Cannot start bridge in state {self._state.value}")

        self._state = BridgeState.PROBING
        logger.info(f"Probing MCP Router at {self.client.base_url}")
        try:
            with anyio.CancelScope() as scope:
                self._active_scope = scope
                await self.client.probe(
                    timeout=timeout if timeout is not None else get_timeout("probe")
                )
        except RemoteError as e:
            self._state = BridgeState.STOPPED
            logger.error(f"Failed to connect to MCP HTTP Server: {e}")
            for hint in STARTUP_HINTS:
                logger.error(hint.format(port=self.options.port))
            raise BridgeStartupError(f"Failed to start MCP Bridge Server: {e}", cause=e) from e
        finally:
            self._active_scope = None

        if self._state is not BridgeState.PROBING:
            logger.info("MCP Bridge Server stopped during startup")
            raise BridgeStoppedError("Bridge stopped before it started serving")

        self._state = BridgeState.SERVING
        logger.info(f"Connected to MCP Router at {self.client.base_url}")

    async def serve(self, read_stream, write_stream) -> None:
        """Answer MCP requests on the given streams until they close or stop() is called."""
        if self._state is not BridgeState.SERVING:
            raise BridgeError(f"Cannot serve in state {self._state.value}; call start() first")

        try:
            with anyio.CancelScope() as scope:
                self._active_scope = scope
                async with BridgeSession(
                    read_stream,
                    write_stream,
                    self.initialization_options(),
                    self.dispatch,
                ) as session:
                    await self._dispatch_loop(session)
        finally:
            self._active_scope = None
            self._state = BridgeState.STOPPED
            logger.info("MCP Bridge Server stopped")

    async def run(self) -> None:
        """Probe the remote, then serve MCP over this process's stdin/stdout."""
        try:
            await self.start()
        except BridgeStoppedError:
            return
        async with stdio_server() as (read_stream, write_stream):
            await self.serve(read_stream, write_stream)

    async def stop(self) -> None:
        """
        Stop probing or serving. Errors while closing are logged, never raised.

        Cancels whichever of the probe or the session loop is running.
        """
        if self._state is BridgeState.STOPPED:
            return
        self._state = BridgeState.STOPPED
        try:
            if self._active_scope is not None:
                self._active_scope.cancel()
        except Exception as e:
            logger.error(f"Error stopping MCP Bridge Server: {e}")
