import asyncio
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from headerpolicy.builder import build_policy
from headerpolicy.config import Settings
from headerpolicy.main import create_app
from headerpolicy.middleware_security import SecurityHeadersMiddleware

SECURITY_HEADERS = (
    "X-Content-Type-Options",
    "Content-Security-Policy",
    "X-Frame-Options",
    "X-XSS-Protection",
    "Strict-Transport-Security",
)


def security_headers(response):
    return {name: response.headers[name] for name in SECURITY_HEADERS if name in response.headers}


def test_general_mode_without_hsts():
    client = TestClient(create_app(build_policy("general")))
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert security_headers(response) == {
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "default-src 'self'",
        "X-Frame-Options": "deny",
        "X-XSS-Protection": "1; mode=block",
    }


def test_api_mode_with_hsts():
    client = TestClient(create_app(build_policy("api", transport_security_enabled=True)))
    response = client.get("/healthz")

    assert security_headers(response) == {
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "default-src 'none'",
        "X-Frame-Options": "deny",
        "X-XSS-Protection": "1; mode=block",
        "Strict-Transport-Security": "max-age=31536000; includeSubdomains; preload",
    }


def test_error_responses_get_headers_too():
    # 404 comes from the router, still passes back through the middleware
    client = TestClient(create_app(build_policy("api")))
    response = client.get("/missing")
    assert response.status_code == 404
    assert response.headers["Content-Security-Policy"] == "default-src 'none'"


def test_body_and_status_untouched():
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, policy=build_policy())

    @app.get("/teapot")
    async def teapot():
        return PlainTextResponse("short and stout", status_code=418)

    response = TestClient(app).get("/teapot")
    assert response.status_code == 418
    assert response.text == "short and stout"
    assert response.headers["X-Frame-Options"] == "deny"


def test_downstream_failure_propagates():
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, policy=build_policy())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("downstream exploded")

    client = TestClient(app)
    with pytest.raises(RuntimeError, match="downstream exploded"):
        client.get("/boom")


class SpyPolicy:
    transport_security = False

    def __init__(self):
        self.applied = []

    def header_map(self):
        return {}

    def apply(self, response):
        self.applied.append(response)


def _request():
    return Request({"type": "http", "method": "GET", "path": "/", "headers": []})


async def _noop_app(scope, receive, send):
    pass


def test_dispatch_calls_downstream_once_and_applies_policy():
    policy = SpyPolicy()
    middleware = SecurityHeadersMiddleware(_noop_app, policy=policy)
    calls = []
    downstream = PlainTextResponse("ok")

    async def call_next(request):
        calls.append(request)
        return downstream

    result = asyncio.run(middleware.dispatch(_request(), call_next))

    assert result is downstream
    assert len(calls) == 1
    assert policy.applied == [downstream]


def test_dispatch_skips_policy_when_downstream_fails():
    policy = SpyPolicy()
    middleware = SecurityHeadersMiddleware(_noop_app, policy=policy)
    error = ValueError("nope")

    async def call_next(request):
        raise error

    with pytest.raises(ValueError) as excinfo:
        asyncio.run(middleware.dispatch(_request(), call_next))

    assert excinfo.value is error
    assert policy.applied == []


def test_policy_logged_once_at_construction(caplog):
    with caplog.at_level(logging.INFO, logger="headerpolicy"):
        SecurityHeadersMiddleware(_noop_app, policy=build_policy("api", transport_security_enabled=True))

    records = [r for r in caplog.records if r.name == "headerpolicy"]
    assert len(records) == 1
    assert records[0].transport_security is True
    assert "Strict-Transport-Security" in records[0].headers


def test_policy_from_settings_when_none_given(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONTENT_TYPE_OPTIONS", raising=False)
    monkeypatch.delenv("CONTENT_SECURITY_POLICY", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("SECURITY_HEADERS_MODE", "api")
    monkeypatch.setenv("HSTS_ENABLED", "true")
    monkeypatch.setattr("headerpolicy.middleware_security.settings", Settings())

    response = TestClient(create_app()).get("/healthz")

    assert response.status_code == 200
    assert security_headers(response) == {
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "default-src 'none'",
        "X-Frame-Options": "deny",
        "X-XSS-Protection": "1; mode=block",
        "Strict-Transport-Security": "max-age=31536000; includeSubdomains; preload",
    }
