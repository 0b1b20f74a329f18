"""tests/conftest.py

Common fixtures for the entire test suite.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from typer.testing import CliRunner

SERVER_URL = "https://analytics.test/api/v2"
COMPONENT_ANALYSES_URL = f"{SERVER_URL}/component-analyses"


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """
    Points configuration at a temporary home directory and the test server,
    so no real ~/.analysis_rc or DEPENDENCY_ANALYTICS_* variable leaks in.
    """
    for key in list(os.environ):
        if key.upper().startswith("DEPENDENCY_ANALYTICS_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("DEPENDENCY_ANALYTICS_HOME_DIR", str(home))
    monkeypatch.setenv("DEPENDENCY_ANALYTICS_SERVER_URL", SERVER_URL)
    yield home


@pytest.fixture
def mock_httpx_client(monkeypatch):
    """
    Replaces httpx.AsyncClient with one that uses a MockTransport.

    Returns a function that tests use to register responses per (method, url);
    query strings are ignored when matching. A callable ``handler`` can be given
    instead of a payload to build the response from the request.
    """
    responses: dict[tuple[str, str], Any] = {}
    requests: list[httpx.Request] = []
    original_client = httpx.AsyncClient

    def add_response(
        url: str,
        method: str = "POST",
        status_code: int = 200,
        json_payload: Any = None,
        content: bytes | None = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ):
        if handler is not None:
            responses[(method.upper(), url)] = handler
            return
        if json_payload is not None:
            body = json.dumps(json_payload).encode("utf-8")
        else:
            body = content if content is not None else b""
        responses[(method.upper(), url)] = (status_code, body)

    def mock_transport(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        entry = responses.get(key)
        if entry is None:
            return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")
        if callable(entry):
            return entry(request)
        status, body = entry
        return httpx.Response(status, content=body, headers={"Content-Type": "application/json"})

    def patched_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(mock_transport)
        return original_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", patched_client)
    add_response.requests = requests  # type: ignore[attr-defined]
    return add_response


@pytest.fixture
def make_record():
    """Factory for raw component-analyses records."""

    def _make(
        package: str,
        version: str,
        *,
        vulnerabilities: int = 0,
        advisories: int = 0,
        exploits: int = 0,
        severity: str | None = None,
        recommended: str | None = None,
        ids: list[str] | None = None,
        package_unknown: bool = False,
    ) -> dict[str, Any]:
        return {
            "package": package,
            "version": version,
            "package_unknown": package_unknown,
            "recommended_versions": recommended,
            "highest_severity": severity,
            "known_security_vulnerability_count": vulnerabilities,
            "security_advisory_count": advisories,
            "exploitable_vulnerabilities_count": exploits,
            "vulnerability": [{"id": i, "severity": severity} for i in (ids or [])],
        }

    return _make


@pytest.fixture
def component_analyses_url() -> str:
    return COMPONENT_ANALYSES_URL
