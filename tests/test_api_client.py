"""Tests for the async API client."""

from __future__ import annotations

import json

import httpx
import pytest

from redline.errors import HttpError, NetworkError
from redline.infrastructure.api_client import ApiClient, ApiResponse, ClientSettings


def _client(handler, **overrides) -> ApiClient:
    settings = ClientSettings(
        base_url="https://api.test",
        api_token=overrides.pop("api_token", "secret-token"),
        retry_min_seconds=0,
        retry_max_seconds=0,
        **overrides,
    )
    return ApiClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_decodes_json_and_sends_auth_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "rev-1"}])

    client = _client(handler)
    data = await client.get("/api/documents/doc-1/revisions", params={"page": 2, "skip": None})
    await client.aclose()

    assert data == [{"id": "rev-1"}]
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/documents/doc-1/revisions"
    assert dict(request.url.params) == {"page": "2"}
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.content == b""


@pytest.mark.asyncio
async def test_no_auth_header_without_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = _client(handler, api_token="")
    await client.get("/ping")

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_post_sends_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "rev-1", "status": "accepted"})

    client = _client(handler)
    data = await client.post("/api/revisions/rev-1/accept", {"note": "ok"})

    assert data == {"id": "rev-1", "status": "accepted"}
    assert json.loads(seen[0].content) == {"note": "ok"}


@pytest.mark.asyncio
async def test_error_status_uses_server_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Revision not found"})

    client = _client(handler)

    with pytest.raises(HttpError) as excinfo:
        await client.post("/api/revisions/rev-9/accept")

    assert excinfo.value.message == "Revision not found"
    assert excinfo.value.status == 404


@pytest.mark.asyncio
async def test_error_status_without_body_uses_status_line() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    client = _client(handler)

    with pytest.raises(HttpError) as excinfo:
        await client.get("/boom")

    assert excinfo.value.message == "API Error: 500 Internal Server Error"


@pytest.mark.asyncio
async def test_http_errors_are_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, json={"message": "busy"})

    client = _client(handler)

    with pytest.raises(HttpError):
        await client.get("/busy", retry=True, retry_count=3)

    assert calls == 1


@pytest.mark.asyncio
async def test_transport_failure_is_not_retried_by_default() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(NetworkError) as excinfo:
        await client.post("/api/revisions/rev-1/reject")

    assert calls == 1
    assert excinfo.value.details["reason"] == "connection refused"


@pytest.mark.asyncio
async def test_opt_in_retry_recovers_from_transport_failure() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise httpx.ConnectError("flaky", request=request)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)

    data = await client.get("/flaky", retry=True, retry_count=3)

    assert data == {"ok": True}
    assert calls == 3


@pytest.mark.asyncio
async def test_retry_gives_up_after_attempts() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("down", request=request)

    client = _client(handler, max_retries=2)

    with pytest.raises(NetworkError):
        await client.get("/down", retry=True)

    assert calls == 2


@pytest.mark.asyncio
async def test_raise_errors_false_returns_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ok":
            return httpx.Response(201, json={"id": "rev-1"})
        return httpx.Response(422, json={"message": "Invalid section"})

    client = _client(handler)

    ok = await client.request("POST", "/ok", {"x": 1}, raise_errors=False)
    failed = await client.request("POST", "/bad", raise_errors=False)

    assert ok == ApiResponse(data={"id": "rev-1"}, error=None, status=201, success=True)
    assert isinstance(failed, ApiResponse)
    assert failed.success is False
    assert failed.status == 422
    assert isinstance(failed.error, HttpError)
    assert failed.error.message == "Invalid section"
