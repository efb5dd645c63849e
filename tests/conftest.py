"""
Pytest fixtures for mcpr tests.
"""

import json
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

from mcpr.controllers.bridge import BridgeServer, ConnectionOptions, RemoteClient

BASE_URL = "http://localhost:3282"


class FakeRouter:
    """
    In-process stand-in for the MCP Router HTTP server.

    Routes are keyed by (method, path). Every request that reaches the
    transport is recorded, so tests can assert on URLs, headers and bodies.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def add(self, method: str, path: str, status: int = 200, json_body=None, text=None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json_body if json_body is not None else {})

        self.routes[(method, path)] = respond

    def add_handler(self, method: str, path: str, handler) -> None:
        self.routes[(method, path)] = handler

    def _handle(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, request: httpx.Request):
        return json.loads(request.content)


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Point ~/.mcpr at a temp dir and clear MCPR_* env vars."""
    for var in ("MCPR_HOST", "MCPR_PORT", "MCPR_TOKEN", "MCPR_DEBUG", "MCPR_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("MCPR_DATA_PATH", str(tmp_path))
    yield tmp_path


@pytest.fixture
def router() -> FakeRouter:
    """Fake MCP Router with a healthy /api/test endpoint."""
    fake = FakeRouter()
    fake.add(
        "GET",
        "/api/test",
        json_body={
            "success": True,
            "message": "MCP HTTP Server is running",
            "timestamp": "2026-10-18T00:00:00Z",
            "aggregatorEnabled": True,
        },
    )
    return fake


@pytest.fixture
def client(router: FakeRouter) -> RemoteClient:
    return RemoteClient(BASE_URL, transport=router.transport)


@pytest.fixture
def bridge(router: FakeRouter) -> BridgeServer:
    options = ConnectionOptions()
    return BridgeServer(options, client=RemoteClient(options.base_url, transport=router.transport))
