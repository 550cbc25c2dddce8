"""Broker protocols defining the seams between the OpenAPI layers.

The portfolio and order managers only need something that performs an
authenticated request, so tests can substitute any object with a
matching ``request`` coroutine.
"""

from typing import Any, Protocol, runtime_checkable

from saxopoint.domain.models import (
    Balance,
    ClosedPosition,
    NetPosition,
    Order,
    OrderOutcome,
    Position,
)
from saxopoint.validation.orders import OrderOptions


@runtime_checkable
class ApiRequester(Protocol):
    """Protocol for authenticated gateway requests."""

    async def request(
        self,
        method: str,
        endpoint: str,
        data: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Perform a request and return the classified JSON body."""
        ...


@runtime_checkable
class PortfolioReader(Protocol):
    """Protocol for account, position and order reads."""

    async def get_accounts(self) -> list[dict[str, Any]]:
        """Get the caller's accounts as provider records."""
        ...

    async def get_positions(
        self, account_key: str | None = None
    ) -> list[Position]:
        """Get open positions."""
        ...

    async def get_orders(self, account_key: str | None = None) -> list[Order]:
        """Get working orders."""
        ...

    async def get_net_positions(
        self, account_key: str | None = None
    ) -> list[NetPosition]:
        """Get net positions."""
        ...

    async def get_closed_positions(
        self,
        account_key: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> list[ClosedPosition]:
        """Get closed positions."""
        ...

    async def get_exposure(
        self, account_key: str | None = None
    ) -> dict[str, Any]:
        """Get the instrument exposure payload."""
        ...

    async def get_balance(self, account_key: str) -> Balance:
        """Get the balance of an account."""
        ...


@runtime_checkable
class OrderManager(Protocol):
    """Protocol for order lifecycle operations."""

    async def create_order(
        self,
        account_key: str,
        side: str,
        uic: int,
        quantity: float,
        order_type: str = "market",
        price: float | None = None,
        stop_limit: float | None = None,
        options: OrderOptions | None = None,
    ) -> OrderOutcome:
        """Submit an order and resolve what it became."""
        ...

    async def modify_order(
        self,
        account_key: str,
        order_id: str,
        price: float | None = None,
        quantity: float | None = None,
    ) -> dict[str, Any]:
        """Change price and/or quantity of a working order."""
        ...

    async def cancel_order(self, account_key: str, order_id: str) -> Any:
        """Cancel one order."""
        ...

    async def cancel_all_orders(
        self, account_key: str, uic: int, asset_type: str
    ) -> Any:
        """Cancel every order on an instrument."""
        ...
