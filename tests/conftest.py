"""Pytest fixtures for saxopoint tests"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from dotenv import load_dotenv

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Load environment variables from .env file for all tests
# This makes live simulation credentials available to integration tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from saxopoint.core.config import AppConfig  # noqa: E402
from saxopoint.domain.models import Session  # noqa: E402
from saxopoint.infrastructure.brokers.saxo import (  # noqa: E402
    Client,
    SaxoRequestClient,
)

API_PREFIX = "/sim/openapi"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeProvider:
    """In-memory stand-in for the OpenAPI and the login service

    Routes are keyed by (method, path); gateway paths are registered
    without the /sim/openapi prefix. Unrouted requests get an empty 404.
    Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text, headers=headers)
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, headers=headers)

        self.routes[(method, path)] = respond

    def handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        respond = self.routes.get((request.method, path))
        if respond is None:
            return httpx.Response(404)
        return respond(request)

    @staticmethod
    def body(request: httpx.Request) -> Any:
        """Decoded JSON body of a recorded request"""
        return json.loads(request.content)

    def sent(self, method: str, path: str | None = None) -> list[httpx.Request]:
        """Recorded requests matching method (and path suffix)"""
        return [
            r
            for r in self.requests
            if r.method == method and (path is None or r.url.path.endswith(path))
        ]


@pytest.fixture
def provider() -> FakeProvider:
    """Fake provider with no routes"""
    return FakeProvider()


@pytest.fixture
def app_config() -> AppConfig:
    """App registration against the simulation endpoints"""
    return AppConfig(
        app_key="app-key",
        app_secret="app-secret",
        redirect_uri="https://example.com/callback",
    )


@pytest.fixture
def session() -> Session:
    return Session(
        access_token="TOKEN", client_id="C1", client_key="K1", name="Test Client"
    )


@pytest.fixture
def request_client(provider: FakeProvider, app_config: AppConfig) -> SaxoRequestClient:
    """Request client wired to the fake provider"""
    return SaxoRequestClient(app_config.api_endpoint, "TOKEN", provider.transport)


@pytest.fixture
def client(session: Session, request_client: SaxoRequestClient) -> Client:
    """Client with an already resolved session"""
    return Client(session, request_client)


# =============================================================================
# Provider record factories
# =============================================================================


def position_record(
    position_id: str = "P1",
    source_order_id: str = "5001",
    uic: int = 21,
    account_id: str = "ACC1",
    status: str = "Open",
    amount: float = 1000.0,
    open_price: float = 1.1,
) -> dict[str, Any]:
    return {
        "PositionId": position_id,
        "PositionBase": {
            "AccountId": account_id,
            "Amount": amount,
            "AssetType": "FxSpot",
            "OpenPrice": open_price,
            "SourceOrderId": source_order_id,
            "Status": status,
            "Uic": uic,
        },
        "PositionView": {
            "CurrentPrice": 1.12,
            "ExposureCurrency": "EUR",
            "ProfitLossOnTrade": 20.0,
        },
    }


def order_record(
    order_id: str = "5001",
    uic: int = 21,
    buy_sell: str = "Buy",
    order_type: str = "Limit",
    status: str = "Working",
    price: float | None = 1.1,
    amount: float = 1000.0,
    asset_type: str = "FxSpot",
    duration_type: str = "GoodTillCancel",
) -> dict[str, Any]:
    return {
        "OrderId": order_id,
        "OrderTime": "2024-01-02T03:04:05.1234567Z",
        "Uic": uic,
        "BuySell": buy_sell,
        "OpenOrderType": order_type,
        "Status": status,
        "Price": price,
        "Amount": amount,
        "ClientId": "C1",
        "AccountId": "ACC1",
        "Exchange": {"ExchangeId": "SBFX"},
        "AssetType": asset_type,
        "Duration": {"DurationType": duration_type},
    }


@pytest.fixture
def make_position() -> Callable[..., dict[str, Any]]:
    """Factory for provider position records"""
    return position_record


@pytest.fixture
def make_order() -> Callable[..., dict[str, Any]]:
    """Factory for provider order records"""
    return order_record
