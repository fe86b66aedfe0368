"""
conftest.py: Shared fixtures for the route console test suite.

Admin API traffic is served by httpx.MockTransport; no gateway is needed.
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from route_console.apisix import ApiClient, RouteManager
from route_console.core import ApiConfig, ConfigStore

BASE_URL = "http://apisix.test:9180/apisix/admin"
API_KEY = "edd1c9f034335f136f87ad84b625c8f1"


class FakeAdminApi:
    """Records requests and answers them with a pluggable handler."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], Any] = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    def reply(self, status_code: int = 200, payload: Any = None, **kwargs):
        """Answer every request with the same response."""
        if payload is not None:
            kwargs["json"] = payload
        self.handler = lambda request: httpx.Response(status_code, **kwargs)

    def route(self, table: Dict[str, Callable[[httpx.Request], Any]]):
        """Dispatch on "METHOD /path" (path relative to the admin prefix)."""
        def handler(request: httpx.Request):
            path = request.url.path[len("/apisix/admin"):]
            return table[f"{request.method} {path}"](request)
        self.handler = handler

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def route_node(route_id: str, **value) -> Dict[str, Any]:
    value.setdefault("uri", f"/{route_id}")
    return {
        "key": f"/apisix/routes/{route_id}",
        "value": {"id": route_id, **value},
        "modifiedIndex": 1,
        "createdIndex": 1,
    }


def route_listing(ids: List[str], total: int = None) -> Dict[str, Any]:
    body = {"list": [route_node(route_id) for route_id in ids]}
    if total is not None:
        body["total"] = total
    return body


@pytest.fixture
def api_config():
    return ApiConfig(base_url=BASE_URL, api_key=API_KEY)


@pytest.fixture
def store(api_config):
    store = ConfigStore()
    store.save(api_config)
    return store


@pytest.fixture
def fake_admin():
    return FakeAdminApi()


@pytest.fixture
def http_client(fake_admin):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_admin))


@pytest.fixture
def api_client(store, http_client):
    return ApiClient(store, client=http_client)


@pytest.fixture
def manager(api_client):
    return RouteManager(api_client, page_size=10)
