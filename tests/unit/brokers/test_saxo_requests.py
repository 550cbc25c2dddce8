"""Unit tests for SaxoRequestClient"""

import logging

import httpx
import pytest
from loguru import logger

from saxopoint.infrastructure.brokers.saxo.requests import (
    SaxoRequestClient,
    _log_httpx_request,
    _log_httpx_response,
    build_http_client,
)
from saxopoint.shared.exceptions import ApiError, TransportError


@pytest.fixture
def captured_logs():
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.mark.unit
class TestRequest:
    """Tests for request execution and classification"""

    @pytest.mark.asyncio
    async def test_sends_bearer_token_and_returns_json(self, provider, request_client):
        provider.route("GET", "/port/v1/clients/me", json={"ClientId": "C1"})

        result = await request_client.request("GET", "/port/v1/clients/me")

        assert result == {"ClientId": "C1"}
        sent = provider.requests[0]
        assert sent.headers["authorization"] == "Bearer TOKEN"
        assert str(sent.url) == (
            "https://gateway.saxobank.com/sim/openapi/port/v1/clients/me"
        )

    @pytest.mark.asyncio
    async def test_query_params_and_json_body(self, provider, request_client):
        provider.route("POST", "/trade/v2/orders", json={"OrderId": "1"})

        await request_client.request(
            "post", "/trade/v2/orders", data={"Uic": 21}, params={"AccountKey": "AK1"}
        )

        sent = provider.requests[0]
        assert sent.method == "POST"
        assert sent.url.params["AccountKey"] == "AK1"
        assert provider.body(sent) == {"Uic": 21}

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_dict(self, provider, request_client):
        provider.route("DELETE", "/trade/v2/orders/1", status=204)

        assert await request_client.request("DELETE", "/trade/v2/orders/1") == {}

    @pytest.mark.asyncio
    async def test_success_with_error_payload_raises_api_error(
        self, provider, request_client
    ):
        provider.route(
            "GET",
            "/port/v1/balances",
            json={"ErrorCode": "X", "Message": "bad", "ModelState": {"Uic": ["?"]}},
        )

        with pytest.raises(ApiError) as exc_info:
            await request_client.request("GET", "/port/v1/balances")

        assert exc_info.value.code == "X"
        assert exc_info.value.message == "bad"
        assert exc_info.value.model_state == {"Uic": ["?"]}
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_error_status_with_error_info_raises_api_error(
        self, provider, request_client
    ):
        provider.route(
            "POST",
            "/trade/v2/orders",
            status=400,
            json={"ErrorInfo": {"ErrorCode": "InsufficientFunds", "Message": "no"}},
        )

        with pytest.raises(ApiError) as exc_info:
            await request_client.request("POST", "/trade/v2/orders", data={})

        assert exc_info.value.code == "InsufficientFunds"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_error_status_without_error_payload(self, provider, request_client):
        provider.route("GET", "/port/v1/positions/me", status=500, text="Server Error")

        with pytest.raises(TransportError) as exc_info:
            await request_client.request("GET", "/port/v1/positions/me")

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "Server Error"

    @pytest.mark.asyncio
    async def test_success_with_non_json_body(self, provider, request_client):
        provider.route("GET", "/port/v1/clients/me", text="<html>maintenance</html>")

        with pytest.raises(TransportError, match="not JSON"):
            await request_client.request("GET", "/port/v1/clients/me")

    @pytest.mark.asyncio
    async def test_network_error_is_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        request_client = SaxoRequestClient(
            "https://gateway.example.com/openapi", "TOKEN", httpx.MockTransport(refuse)
        )

        with pytest.raises(TransportError, match="connection refused"):
            await request_client.request("GET", "/port/v1/clients/me")

    @pytest.mark.asyncio
    async def test_set_http_client(self, provider):
        request_client = SaxoRequestClient("https://gateway.example.com/openapi", "T")
        provider.route("GET", "/openapi/ping", json={"ok": True})
        request_client.set_http_client(httpx.AsyncClient(transport=provider.transport))

        assert await request_client.request("GET", "/ping") == {"ok": True}
        await request_client.aclose()


@pytest.mark.unit
def test_api_endpoint_trailing_slash_stripped():
    request_client = SaxoRequestClient("https://gateway.example.com/openapi/", "T")

    assert request_client.api_endpoint == "https://gateway.example.com/openapi"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_request_log_masks_credentials(captured_logs):
    request = httpx.Request(
        "GET",
        "https://gateway.example.com/openapi/port/v1/clients/me",
        headers={"Authorization": "Bearer SECRET", "Cookie": "session=SECRET"},
    )

    await _log_httpx_request(request)

    assert captured_logs
    assert all("SECRET" not in message for message in captured_logs)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_token_response_body_not_logged(captured_logs):
    request = httpx.Request("POST", "https://sim.logonvalidation.net/token")
    response = httpx.Response(
        200, json={"access_token": "SECRET"}, request=request
    )

    await _log_httpx_response(response)

    assert captured_logs
    assert all("SECRET" not in message for message in captured_logs)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_redirect_log_masks_authorization_code(captured_logs):
    request = httpx.Request("GET", "https://sim.logonvalidation.net/complete-login")
    response = httpx.Response(
        302,
        headers={
            "Location": "https://example.com/callback?code=CODE123&state=abc",
            "Set-Cookie": "session=SECRET",
        },
        request=request,
    )

    await _log_httpx_response(response)

    assert captured_logs
    assert all("CODE123" not in message for message in captured_logs)
    assert all("SECRET" not in message for message in captured_logs)
    assert any("state=abc" in message for message in captured_logs)


@pytest.mark.unit
def test_building_clients_leaves_httpx_logging_alone():
    httpx_logger = logging.getLogger("httpx")
    before = (httpx_logger.level, httpx_logger.propagate, list(httpx_logger.handlers))

    SaxoRequestClient("https://gateway.example.com/openapi", "T")
    build_http_client()

    after = (httpx_logger.level, httpx_logger.propagate, list(httpx_logger.handlers))
    assert after == before
