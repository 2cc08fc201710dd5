"""Tests for the async sellout HTTP client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from selloutctl.core.client import (
    SelloutClient,
    extract_error_detail,
    is_json_response,
    raise_for_status,
)
from selloutctl.core.exceptions import (
    EndpointNotFoundError,
    InvalidURLError,
    MalformedResponseError,
    RetryExhaustedError,
    ServerError,
    ServerUnreachableError,
)


def _response(status: int, **kwargs) -> httpx.Response:
    request = httpx.Request("GET", "https://sellout.example.com/api-sellout/rm/ventas")
    return httpx.Response(status, request=request, **kwargs)


# =============================================================================
# Response Helpers
# =============================================================================


class TestResponseHelpers:
    """Tests for response classification helpers."""

    def test_is_json_response(self):
        assert is_json_response(_response(200, json={"ok": True}))
        assert not is_json_response(_response(200, text="ok"))

    def test_error_detail_prefers_error_key(self):
        resp = _response(400, json={"ok": False, "error": "codCliente requerido", "message": "x"})
        assert extract_error_detail(resp) == "codCliente requerido"

    def test_error_detail_message_key(self):
        assert extract_error_detail(_response(400, json={"message": "bad"})) == "bad"

    def test_error_detail_dumps_other_json(self):
        assert extract_error_detail(_response(400, json={"ok": False})) == '{"ok": false}'

    def test_error_detail_text(self):
        assert extract_error_detail(_response(502, text="Bad Gateway\n")) == "Bad Gateway"

    def test_raise_for_status_passes_success(self):
        raise_for_status(_response(204))

    def test_raise_for_status_keeps_url(self):
        with pytest.raises(EndpointNotFoundError) as exc_info:
            raise_for_status(_response(404, text="nope"))
        assert exc_info.value.url == "https://sellout.example.com/api-sellout/rm/ventas"


# =============================================================================
# SelloutClient
# =============================================================================


class TestSelloutClient:
    """Tests for SelloutClient."""

    def test_normalizes_base_url(self):
        client = SelloutClient(base_url="https://sellout.example.com/api-sellout/rm/")
        assert client.base_url == "https://sellout.example.com/api-sellout/rm"

    def test_rejects_invalid_url(self):
        with pytest.raises(InvalidURLError):
            SelloutClient(base_url="sellout.example.com")

    def test_get_json_sends_params(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"id": 1}])

        async def scenario():
            async with make_client(handler) as client:
                return await client.get_json("/ventas", params={"anio": 2025, "mes": 3})

        assert asyncio.run(scenario()) == [{"id": 1}]
        assert seen[0].url.path == "/api-sellout/rm/ventas"
        assert seen[0].url.params["anio"] == "2025"
        assert seen[0].headers["accept"] == "application/json"

    def test_get_json_invalid_body(self, make_client):
        async def scenario():
            async with make_client(lambda r: httpx.Response(200, text="not json")) as client:
                await client.get_json("/ventas")

        with pytest.raises(MalformedResponseError):
            asyncio.run(scenario())

    def test_client_error_not_retried(self, make_client):
        calls: list[httpx.Request] = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"error": "missing"})

        async def scenario():
            async with make_client(handler, max_retries=3) as client:
                await client.get("/ventas")

        with pytest.raises(EndpointNotFoundError):
            asyncio.run(scenario())
        assert len(calls) == 1

    def test_retries_gateway_errors_then_succeeds(self, make_client):
        statuses = iter([503, 502, 200])

        def handler(request):
            status = next(statuses)
            if status == 200:
                return httpx.Response(200, json={"ok": True})
            return httpx.Response(status, text="busy")

        async def scenario():
            async with make_client(handler, max_retries=3) as client:
                return await client.get_json("/ventas")

        with patch("selloutctl.core.client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            assert asyncio.run(scenario()) == {"ok": True}

        assert [c.args[0] for c in sleep.await_args_list] == [2, 4]

    def test_retry_exhausted(self, make_client):
        calls: list[httpx.Request] = []

        def handler(request):
            calls.append(request)
            return httpx.Response(504, text="timeout")

        async def scenario():
            async with make_client(handler, max_retries=2) as client:
                await client.get("/ventas")

        with patch("selloutctl.core.client.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(RetryExhaustedError) as exc_info:
                asyncio.run(scenario())

        assert len(calls) == 3
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_error, ServerError)

    def test_internal_server_error_not_retried(self, make_client):
        calls: list[httpx.Request] = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="boom")

        async def scenario():
            async with make_client(handler, max_retries=2) as client:
                await client.get("/ventas")

        with pytest.raises(ServerError):
            asyncio.run(scenario())
        assert len(calls) == 1

    def test_unreachable_server(self, make_client):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async def scenario():
            async with make_client(handler) as client:
                await client.get("/ventas")

        with pytest.raises(RetryExhaustedError) as exc_info:
            asyncio.run(scenario())
        assert isinstance(exc_info.value.last_error, ServerUnreachableError)
