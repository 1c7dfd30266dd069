"""Test fixtures: app factory with a recording route + FastAPI TestClient."""
from typing import Any, Callable, Generator, Optional

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from csrf_guard.constants import (
    ENV_ALLOWED_CONTENT_TYPES,
    ENV_ALLOWED_ORIGINS,
    ENV_CHECK_REFERER,
    ENV_EXEMPT_PATHS,
    ENV_SEC_FETCH_SITE,
)
from csrf_guard.evaluator import CSRFPolicy, RequestFacts
from csrf_guard.main import create_app
from csrf_guard.schemas import CSRFOptions

BASE_URL = "http://localhost"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CSRF_* variables from the developer's shell out of the tests."""
    for name in (
        ENV_ALLOWED_ORIGINS,
        ENV_SEC_FETCH_SITE,
        ENV_CHECK_REFERER,
        ENV_ALLOWED_CONTENT_TYPES,
        ENV_EXEMPT_PATHS,
    ):
        monkeypatch.delenv(name, raising=False)


def add_recording_routes(app: FastAPI) -> list[str]:
    """Add /test handlers for every method; returns the list of calls made."""
    calls: list[str] = []

    @app.api_route("/test", methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"])
    async def record(request: Request) -> dict[str, str]:
        calls.append(request.method)
        return {"result": f"{request.method} success"}

    @app.post("/webhook")
    async def webhook() -> dict[str, str]:
        calls.append("webhook")
        return {"result": "ok"}

    return calls


@pytest.fixture()
def make_client() -> Generator[Callable[..., tuple[TestClient, list[str]]], None, None]:
    """Factory: build an app-wide protected client from option kwargs."""
    clients: list[TestClient] = []

    def _make(exempt_paths: tuple[str, ...] = (), **options: Any) -> tuple[TestClient, list[str]]:
        app = create_app(CSRFOptions(**options), exempt_paths=exempt_paths)
        calls = add_recording_routes(app)
        client = TestClient(app, base_url=BASE_URL)
        clients.append(client)
        return client, calls

    yield _make
    for c in clients:
        c.close()


@pytest.fixture()
def client(make_client: Callable[..., tuple[TestClient, list[str]]]) -> TestClient:
    """Client for an app protected with the default policy."""
    c, _ = make_client()
    return c


def make_facts(
    method: str = "POST",
    content_type: Optional[str] = None,
    origin: Optional[str] = None,
    referer: Optional[str] = None,
    sec_fetch_site: Optional[str] = None,
    request_origin: str = BASE_URL,
    context: Any = None,
) -> RequestFacts:
    """Factory helper: request facts with localhost as the server origin."""
    return RequestFacts(
        method=method,
        content_type=content_type,
        origin=origin,
        referer=referer,
        sec_fetch_site=sec_fetch_site,
        request_origin=request_origin,
        context=context,
    )


@pytest.fixture()
def default_policy() -> CSRFPolicy:
    return CSRFPolicy()
