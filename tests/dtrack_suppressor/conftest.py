"""tests/conftest.py

Common fixtures for the entire test suite.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner


API_URL = "http://dtrack.test"


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Removes DTRACK_* variables and runs each test from an empty directory so
    neither the caller's environment nor a local .env file leaks into settings.
    """
    import os

    for key in list(os.environ):
        if key.upper().startswith("DTRACK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def api_env(monkeypatch):
    """Points the settings at the mock server with a token configured."""
    monkeypatch.setenv("DTRACK_API_URL", API_URL)
    monkeypatch.setenv("DTRACK_API_KEY", "test-token-123456")
    return API_URL


@pytest.fixture
def mock_httpx_client(monkeypatch):
    """
    Replaces httpx.Client with a mock that uses a MockTransport.

    Returns a function that tests use to register mock responses. Registering
    the same (method, url) several times queues the responses; the last one
    is repeated once the queue is drained. Unregistered URLs answer 404.
    """
    responses: dict[tuple[str, str], list] = {}
    calls_log: list[tuple[str, str]] = []
    requests_log: list[httpx.Request] = []
    original_client = httpx.Client

    def add_response(
        url: str,
        method: str = "GET",
        status_code: int = 200,
        json_payload: object | None = None,
        content: bytes | None = None,
        exc: Exception | None = None,
        headers: dict[str, str] | None = None,
    ):
        """Register a mock response (or a transport error) for a URL and method."""
        if json_payload is not None:
            body = json.dumps(json_payload).encode("utf-8")
        else:
            body = content if content is not None else b""
        responses.setdefault((method.upper(), url), []).append((status_code, body, exc, headers or {}))

    def mock_transport(request: httpx.Request) -> httpx.Response:
        key = (request.method, str(request.url))
        calls_log.append(key)
        requests_log.append(request)
        queue = responses.get(key)
        if queue:
            status, body, exc, extra_headers = queue.pop(0) if len(queue) > 1 else queue[0]
            if exc is not None:
                raise exc
            headers = {"Content-Length": str(len(body)), "Content-Type": "application/json"}
            headers.update(extra_headers)
            return httpx.Response(status, content=body, headers=headers)

        return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")

    def patched_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(mock_transport)
        return original_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", patched_client)
    add_response.calls = calls_log  # type: ignore[attr-defined]
    add_response.requests = requests_log  # type: ignore[attr-defined]
    return add_response
