"""Pytest fixtures for the Treolan token manager, gateway and routes."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from treolan_proxy.integrations.clients.real_http.token_manager import TokenManager
from treolan_proxy.integrations.clients.real_http.treolan import TreolanGateway

BASE_URL = "https://treolan.test/api/v1"
BASE_PATH = "/api/v1"
FIXTURES_DIR = Path(__file__).parent / "fixtures"

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """
    In-memory Treolan. Replies are queued per (method, path); the last reply
    for a route keeps being served once the queue is down to one.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *replies: Reply) -> None:
        self.routes.setdefault((method, BASE_PATH + path), []).extend(replies)

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == BASE_PATH + path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text="no such route")
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(reply):
            return reply(request)
        status, payload = reply
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))


def _make_token_manager(http_client, clock, auth_paths=("/auth/token",), static_token: Optional[str] = "", **kwargs):
    return TokenManager(
        http_client,
        BASE_URL,
        kwargs.pop("login", "m3-login"),
        kwargs.pop("password", "s3cret"),
        static_token=static_token or "",
        auth_paths=auth_paths,
        clock=clock,
        **kwargs,
    )


@pytest.fixture
def token_manager(http_client, clock):
    return _make_token_manager(http_client, clock)


@pytest.fixture
def gateway(token_manager, http_client):
    return TreolanGateway(token_manager, http_client, BASE_URL)


@pytest.fixture
def make_manager(http_client, clock):
    def factory(**kwargs):
        return _make_token_manager(http_client, clock, **kwargs)

    return factory


@pytest.fixture
def make_gateway(http_client, make_manager):
    def factory(**kwargs):
        return TreolanGateway(make_manager(**kwargs), http_client, BASE_URL)

    return factory


@pytest.fixture
def catalog_tree():
    """Catalog/Get response in the current categories -> children -> products shape."""
    return json.loads((FIXTURES_DIR / "catalog_tree.json").read_text(encoding="utf-8"))
