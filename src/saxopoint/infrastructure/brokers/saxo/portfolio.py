"""Portfolio reads: accounts, positions, orders, exposure and balances

Every read issues a fresh request; nothing is cached. Failures propagate
from here; the facade decides which reads are lenient.
"""

from functools import partial
from typing import Any

from loguru import logger

from saxopoint.domain.models import (
    Balance,
    ClosedPosition,
    NetPosition,
    Order,
    Position,
    Session,
)
from saxopoint.infrastructure.brokers.protocols import ApiRequester, PortfolioReader

from .normalizer import (
    normalize_balance,
    normalize_closed_position,
    normalize_list,
    normalize_net_position,
    normalize_order,
    normalize_position,
)


class SaxoPortfolio(PortfolioReader):
    """Portfolio queries scoped to one session

    Without an account key the "me" endpoints are used, otherwise the
    query is scoped by ClientKey and AccountKey.
    """

    def __init__(self, request_client: ApiRequester, session: Session) -> None:
        self.request_client = request_client
        self.session = session

    def _scope(
        self, resource: str, account_key: str | None
    ) -> tuple[str, dict | None]:
        if account_key is None:
            return f"/port/v1/{resource}/me", None
        return f"/port/v1/{resource}", {
            "ClientKey": self.session.client_key,
            "AccountKey": account_key,
        }

    async def get_accounts(self) -> list[dict[str, Any]]:
        response = await self.request_client.request("GET", "/port/v1/accounts/me")
        accounts = normalize_list(response, lambda record: record)
        logger.debug(f"Found {len(accounts)} accounts")
        return accounts

    async def get_positions(
        self, account_key: str | None = None
    ) -> list[Position]:
        endpoint, params = self._scope("positions", account_key)
        response = await self.request_client.request("GET", endpoint, params=params)
        return normalize_list(
            response,
            partial(normalize_position, client_id=self.session.client_id),
        )

    async def get_orders(self, account_key: str | None = None) -> list[Order]:
        endpoint, params = self._scope("orders", account_key)
        response = await self.request_client.request("GET", endpoint, params=params)
        return normalize_list(response, normalize_order)

    async def get_net_positions(
        self, account_key: str | None = None
    ) -> list[NetPosition]:
        endpoint, params = self._scope("netpositions", account_key)
        response = await self.request_client.request("GET", endpoint, params=params)
        return normalize_list(
            response,
            partial(normalize_net_position, client_id=self.session.client_id),
        )

    async def get_closed_positions(
        self,
        account_key: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> list[ClosedPosition]:
        """Closed positions, optionally bounded by FromDateTime/ToDateTime"""
        endpoint, params = self._scope("closedpositions", account_key)
        if from_date is not None or to_date is not None:
            params = dict(params or {})
            if from_date is not None:
                params["FromDateTime"] = from_date
            if to_date is not None:
                params["ToDateTime"] = to_date
        response = await self.request_client.request("GET", endpoint, params=params)
        return normalize_list(
            response,
            partial(normalize_closed_position, client_id=self.session.client_id),
        )

    async def get_exposure(
        self, account_key: str | None = None
    ) -> dict[str, Any]:
        endpoint, params = self._scope("exposure", account_key)
        response = await self.request_client.request("GET", endpoint, params=params)
        return response if isinstance(response, dict) else {"Data": response}

    async def get_balance(self, account_key: str) -> Balance:
        response = await self.request_client.request(
            "GET",
            "/port/v1/balances",
            params={
                "ClientKey": self.session.client_key,
                "AccountKey": account_key,
            },
        )
        return normalize_balance(response)
