"""Fixtures for the Fizzy MCP test suite.

Provides an in-memory fake of the Fizzy HTTP API served through
httpx.MockTransport, so no test touches the network.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from fizzy_mcp.client import FizzyClient
from fizzy_mcp.config import FizzyConfig
from fizzy_mcp.tool_router import ClientCache, ToolRouter

BASE_URL = "https://fizzy.test"
ACCOUNT_SLUG = "897362094"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeFizzyAPI:
    """Records requests and answers them from registered routes."""

    def __init__(self, accounts: list[dict[str, Any]] | None = None):
        if accounts is None:
            accounts = [{"id": "acc-1", "name": "Acme", "slug": f"/{ACCOUNT_SLUG}", "created_at": "2025-01-01"}]
        self.accounts = accounts
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Handler] = {}

    def on(self, method: str, path: str, status: int = 200, body: Any = None, headers: dict | None = None) -> None:
        """Register a canned response for an account-scoped path."""

        def handler(request: httpx.Request) -> httpx.Response:
            if body is None:
                return httpx.Response(status, headers=headers, request=request)
            return httpx.Response(status, json=body, headers=headers, request=request)

        self.routes[(method, f"/{ACCOUNT_SLUG}{path}")] = handler

    def on_call(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, f"/{ACCOUNT_SLUG}{path}")] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/my/identity":
            return httpx.Response(200, json={"accounts": self.accounts}, request=request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "no route"}, request=request)
        return handler(request)

    def api_requests(self) -> list[httpx.Request]:
        """Requests other than the identity lookup."""
        return [r for r in self.requests if r.url.path != "/my/identity"]

    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path.removeprefix(f"/{ACCOUNT_SLUG}")) for r in self.api_requests()]


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def fake_api():
    return FakeFizzyAPI()


@pytest.fixture
def client_factory(fake_api):
    """FizzyClient factory wired to the fake API transport."""

    def factory(token: str, base_url: str = BASE_URL) -> FizzyClient:
        return FizzyClient(token=token, base_url=base_url, transport=httpx.MockTransport(fake_api))

    return factory


@pytest.fixture
async def client(client_factory):
    fizzy = client_factory("test-token")
    yield fizzy
    await fizzy.aclose()


@pytest.fixture
def config_holder():
    """Mutable config the router re-reads on every call."""
    return {"config": FizzyConfig(token="test-token", url=BASE_URL)}


@pytest.fixture
async def router(client_factory, config_holder):
    cache = ClientCache(client_factory=client_factory)
    yield ToolRouter(cache=cache, config_loader=lambda: config_holder["config"])
    await cache.aclose()
