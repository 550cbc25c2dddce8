"""Client facade: credential resolution, client identity and bound accounts"""

from collections.abc import Awaitable
from datetime import datetime
from typing import Any, TypeVar

import httpx
from loguru import logger

from saxopoint.core.config import AppConfig
from saxopoint.domain.models import (
    Balance,
    ClosedPosition,
    Credentials,
    NetPosition,
    Order,
    OrderOutcome,
    Position,
    Session,
)
from saxopoint.shared.exceptions import TransportError
from saxopoint.validation.orders import OrderOptions, OrderRequest, PreCheckResult

from .auth import SaxoAuthManager
from .normalizer import ACCOUNT_FIELDS, CLIENT_FIELDS, extract
from .orders import SaxoOrders
from .portfolio import SaxoPortfolio
from .requests import SaxoRequestClient

T = TypeVar("T")


async def _lenient(read: Awaitable[T], default: T, what: str) -> T:
    """Await a read, returning ``default`` on any failure"""
    try:
        return await read
    except Exception as e:
        logger.warning(f"Failed to fetch {what}, returning empty result: {e}")
        return default


def _iso(value: str | datetime | None) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class Account:
    """One trading account with operations bound to its key

    Re-created on every Client.get_accounts() call.
    """

    def __init__(self, client: "Client", record: dict[str, Any]) -> None:
        values = extract(record, ACCOUNT_FIELDS)
        self.id: str | None = values["id"]
        self.key: str = values["key"]
        self.active: bool | None = values["active"]
        self.currency: str | None = values["currency"]
        self.raw = record
        self._client = client

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id!r}, key={self.key!r}, "
            f"active={self.active!r}, currency={self.currency!r})"
        )

    async def get_balance(self) -> Balance:
        return await self._client.get_balance(self.key)

    async def get_positions(self) -> list[Position]:
        return await self._client.get_positions(self.key)

    async def get_orders(self) -> list[Order]:
        return await self._client.get_orders(self.key)

    async def buy(
        self,
        uic: int,
        quantity: float,
        order_type: str = "market",
        price: float | None = None,
        stop_limit: float | None = None,
        options: OrderOptions | None = None,
    ) -> OrderOutcome:
        return await self._client.orders.create_order(
            self.key, "buy", uic, quantity, order_type, price, stop_limit, options
        )

    async def sell(
        self,
        uic: int,
        quantity: float,
        order_type: str = "market",
        price: float | None = None,
        stop_limit: float | None = None,
        options: OrderOptions | None = None,
    ) -> OrderOutcome:
        return await self._client.orders.create_order(
            self.key, "sell", uic, quantity, order_type, price, stop_limit, options
        )

    async def cancel_order(self, order_id: str) -> Any:
        return await self._client.orders.cancel_order(self.key, order_id)

    async def cancel_all_orders(self, uic: int, asset_type: str) -> Any:
        return await self._client.orders.cancel_all_orders(
            self.key, uic, asset_type
        )

    async def modify_order(
        self,
        order_id: str,
        price: float | None = None,
        quantity: float | None = None,
    ) -> dict[str, Any]:
        return await self._client.orders.modify_order(
            self.key, order_id, price, quantity
        )


class Client:
    """Authenticated OpenAPI client (facade)

    Delegates to SaxoPortfolio for reads and SaxoOrders for trading.
    Position, order and exposure list reads never raise: a failed fetch is
    logged and an empty result is returned. Accounts, balances, pre-trade
    checks and every trading call raise.

    Use ``create_client`` to build one.
    """

    def __init__(self, session: Session, request_client: SaxoRequestClient) -> None:
        self._session = session
        self._request_client = request_client
        self.portfolio = SaxoPortfolio(request_client, session)
        self.orders = SaxoOrders(request_client, self.portfolio, session)

    def __repr__(self) -> str:
        return f"Client(id={self.id!r}, key={self.key!r}, name={self.name!r})"

    @property
    def session(self) -> Session:
        return self._session

    @property
    def id(self) -> str:
        return self._session.client_id

    @property
    def key(self) -> str:
        return self._session.client_key

    @property
    def name(self) -> str | None:
        return self._session.name

    async def aclose(self) -> None:
        await self._request_client.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def get_accounts(self) -> list[Account]:
        records = await self.portfolio.get_accounts()
        return [Account(self, record) for record in records]

    async def get_positions(self, account_key: str | None = None) -> list[Position]:
        return await _lenient(
            self.portfolio.get_positions(account_key), [], "positions"
        )

    async def get_orders(self, account_key: str | None = None) -> list[Order]:
        return await _lenient(self.portfolio.get_orders(account_key), [], "orders")

    async def get_net_positions(
        self, account_key: str | None = None
    ) -> list[NetPosition]:
        return await _lenient(
            self.portfolio.get_net_positions(account_key), [], "net positions"
        )

    async def get_closed_positions(
        self,
        account_key: str | None = None,
        from_date: str | datetime | None = None,
        to_date: str | datetime | None = None,
    ) -> list[ClosedPosition]:
        return await _lenient(
            self.portfolio.get_closed_positions(
                account_key, _iso(from_date), _iso(to_date)
            ),
            [],
            "closed positions",
        )

    async def get_exposure(self, account_key: str | None = None) -> dict[str, Any]:
        return await _lenient(
            self.portfolio.get_exposure(account_key), {}, "exposure"
        )

    async def get_balance(self, account_key: str) -> Balance:
        return await self.portfolio.get_balance(account_key)

    async def pre_check_order(self, request: OrderRequest) -> PreCheckResult:
        return await self.orders.pre_check_order(request)


async def _resolve_access_token(
    credentials: Credentials,
    config: AppConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> str:
    if credentials.type == "token":
        logger.info("Using supplied access token")
        return credentials.token

    token = await SaxoAuthManager(config, transport).authenticate(
        credentials.username, credentials.password
    )
    return token.access_token


async def create_client(
    credentials: Credentials,
    config: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Client:
    """Resolve credentials and load the caller's client identity

    Args:
        credentials: Token or username/password credentials
        config: App registration and endpoints
        transport: Optional httpx transport shared by every request (for testing)

    Returns:
        A ready Client owning one HTTP connection pool

    Raises:
        AuthenticationError: If the login flow fails
        ApiError: If the client identity request is rejected
        TransportError: If the client identity cannot be fetched
    """
    access_token = await _resolve_access_token(credentials, config, transport)

    request_client = SaxoRequestClient(config.api_endpoint, access_token, transport)
    try:
        response = await request_client.request("GET", "/port/v1/clients/me")
        identity = extract(response if isinstance(response, dict) else {}, CLIENT_FIELDS)
        if not identity["id"] or not identity["key"]:
            raise TransportError(
                "Client identity missing from /port/v1/clients/me response",
                body=str(response),
            )
    except Exception:
        await request_client.aclose()
        raise

    session = Session(
        access_token=access_token,
        client_id=identity["id"],
        client_key=identity["key"],
        name=identity["name"],
    )
    logger.info(f"Connected as client {session.client_id} ({session.name})")
    return Client(session, request_client)
