"""Saxo order lifecycle: validation, submission, reconciliation and changes"""

from datetime import UTC, datetime
from typing import Any

from loguru import logger

from saxopoint.domain.models import (
    ORDER_TYPES,
    SIDES,
    Order,
    OrderOutcome,
    Position,
    Session,
)
from saxopoint.infrastructure.brokers.protocols import (
    ApiRequester,
    OrderManager,
    PortfolioReader,
)
from saxopoint.shared.exceptions import (
    OrderNotFound,
    SubmissionFailed,
    ValidationError,
)
from saxopoint.validation.orders import (
    OrderDuration,
    OrderOptions,
    OrderRequest,
    PreCheckResult,
)

from .normalizer import normalize_order, source_order_id, unwrap_order_record

PROVIDER_ORDER_TYPES = {
    "market": "Market",
    "limit": "Limit",
    "stop": "Stop",
    "stop_limit": "StopLimit",
}

PROVIDER_SIDES = {"buy": "Buy", "sell": "Sell"}

ORDERS_ENDPOINT = "/trade/v2/orders"


def validate_order(
    order_type: str,
    price: float | None = None,
    stop_limit: float | None = None,
    side: str = "buy",
) -> None:
    """Reject malformed order parameters before anything is sent

    Checks run in a fixed order, the first violation wins.

    Raises:
        ValidationError: If the combination cannot be submitted
    """
    if order_type == "stop" and stop_limit is None:
        raise ValidationError("Stop orders require a stop limit price")

    if order_type == "market" and (price is not None or stop_limit is not None):
        raise ValidationError("Market orders cannot have a price or stop limit")

    if order_type in ("limit", "stop_limit") and price is None:
        raise ValidationError("Limit orders require a price")

    if order_type not in ORDER_TYPES:
        raise ValidationError(f"Invalid order type: {order_type}")

    if side not in SIDES:
        raise ValidationError(f"Invalid order side: {side}")


def build_order_body(
    account_key: str,
    side: str,
    uic: int,
    quantity: float,
    order_type: str,
    price: float | None,
    stop_limit: float | None,
    options: OrderOptions,
) -> dict[str, Any]:
    """Translate validated order parameters into the provider's JSON body"""
    body: dict[str, Any] = {
        "AccountKey": account_key,
        "Uic": uic,
        "BuySell": PROVIDER_SIDES[side],
        "OrderType": PROVIDER_ORDER_TYPES[order_type],
        "Amount": quantity,
        "ManualOrder": options.manual_order,
    }

    if price is not None:
        body["OrderPrice"] = price
    if stop_limit is not None:
        body["StopLimitPrice"] = stop_limit

    if order_type != "market":
        duration = options.duration or OrderDuration()
        body["OrderDuration"] = duration.to_payload()

    # Optional fields only when provided
    extras = options.to_payload()
    for key in (
        "AssetType",
        "ExternalReference",
        "IsForceOpen",
        "TrailingStopDistanceToMarket",
        "TrailingStopStep",
    ):
        if key in extras:
            body[key] = extras[key]

    return body


class SaxoOrders(OrderManager):
    """Saxo order management operations

    Handles submission with reconciliation, modification, cancellation and
    pre-trade checks for one session.
    """

    def __init__(
        self,
        request_client: ApiRequester,
        portfolio: PortfolioReader,
        session: Session,
    ) -> None:
        """Initialize orders service

        Args:
            request_client: Authenticated gateway requester
            portfolio: Reader used for position and order lookups
            session: Session the orders are placed under
        """
        self.request_client = request_client
        self.portfolio = portfolio
        self.session = session

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
        """Submit an order and resolve whether it is still working

        Args:
            account_key: Account to place the order on
            side: "buy" or "sell"
            uic: Instrument identifier
            quantity: Order amount
            order_type: market, limit, stop or stop_limit
            price: Order price (not allowed for market orders)
            stop_limit: Stop limit price
            options: Optional provider fields

        Returns:
            The pending Order, or the Position it was filled into

        Raises:
            ValidationError: If the parameters are rejected (no request made)
            ApiError: If the provider rejects the submission
            SubmissionFailed: If the provider returns no order id
        """
        validate_order(order_type, price, stop_limit, side)
        options = options or OrderOptions()

        body = build_order_body(
            account_key, side, uic, quantity, order_type, price, stop_limit, options
        )

        logger.info(
            f"Placing {order_type} order: {side} {quantity} x {uic} "
            f"(price={price}, stop_limit={stop_limit})"
        )
        response = await self.request_client.request(
            "POST", ORDERS_ENDPOINT, data=body
        )
        logger.debug(f"Order response: {response}")

        order_id = response.get("OrderId") if isinstance(response, dict) else None
        if not order_id:
            logger.error(f"Order submission returned no order id: {response}")
            raise SubmissionFailed(
                "Order submission returned no order id", response=response
            )

        logger.info(f"Order accepted: {order_id}")
        return await self._reconcile(
            str(order_id), account_key, side, uic, quantity, order_type, price,
            options,
        )

    async def _reconcile(
        self,
        order_id: str,
        account_key: str,
        side: str,
        uic: int,
        quantity: float,
        order_type: str,
        price: float | None,
        options: OrderOptions,
    ) -> OrderOutcome:
        """Resolve an accepted order into an Order or the Position it opened

        1. The order itself, if the provider still lists it
        2. The position whose source order id matches, if it executed
        3. A locally built working Order otherwise
        """
        order = await self._find_submitted_order(order_id)
        if order is not None:
            logger.info(f"Order {order_id} is {order.status}")
            return order

        position = await self._find_position_from_order(order_id, account_key)
        if position is not None:
            logger.info(f"Order {order_id} executed into position {position.id}")
            return position

        logger.warning(
            f"Order {order_id} not found as order or position; "
            f"returning submitted parameters as a working order"
        )
        return Order(
            id=order_id,
            time=datetime.now(UTC),
            uic=uic,
            type=side,
            order_type=order_type,
            status="working",
            price=price,
            quantity=quantity,
            client_id=self.session.client_id,
            account_id=None,
            exchange_id=None,
            asset_type=options.asset_type,
            external_reference=options.external_reference,
        )

    async def _find_submitted_order(self, order_id: str) -> Order | None:
        try:
            response = await self.request_client.request(
                "GET", f"{ORDERS_ENDPOINT}/{self.session.client_key}/{order_id}"
            )
        except Exception as e:
            logger.debug(f"Order {order_id} lookup failed: {e}")
            return None

        record = unwrap_order_record(response)
        return normalize_order(record) if record is not None else None

    async def _find_position_from_order(
        self, order_id: str, account_key: str
    ) -> Position | None:
        try:
            positions = await self.portfolio.get_positions(account_key)
        except Exception as e:
            logger.warning(f"Position lookup for order {order_id} failed: {e}")
            return None

        for position in positions:
            if str(source_order_id(position)) == order_id:
                return position
        return None

    async def modify_order(
        self,
        account_key: str,
        order_id: str,
        price: float | None = None,
        quantity: float | None = None,
    ) -> dict[str, Any]:
        """Change the price and/or quantity of a working order

        The provider needs the full type context of the order, so the
        current order is looked up first.

        Raises:
            ValidationError: If neither price nor quantity is given
            OrderNotFound: If the order is not among the account's orders
        """
        if price is None and quantity is None:
            raise ValidationError("Nothing to modify: give a price or a quantity")

        orders = await self.portfolio.get_orders(account_key)
        current = next((o for o in orders if str(o.id) == str(order_id)), None)
        if current is None:
            logger.error(f"Order {order_id} not found on account {account_key}")
            raise OrderNotFound(order_id)

        duration = (current.raw.get("Duration") or {}).get("DurationType")
        body = {
            "AccountKey": account_key,
            "OrderId": order_id,
            "AssetType": current.asset_type,
            "OrderType": PROVIDER_ORDER_TYPES.get(
                current.order_type, current.order_type
            ),
            "Amount": quantity if quantity is not None else current.quantity,
            "OrderPrice": price if price is not None else current.price,
            "OrderDuration": {"DurationType": duration or "GoodTillCancel"},
        }

        logger.info(
            f"Modifying order {order_id}: price={body['OrderPrice']} "
            f"amount={body['Amount']}"
        )
        return await self.request_client.request("PATCH", ORDERS_ENDPOINT, data=body)

    async def cancel_order(self, account_key: str, order_id: str) -> Any:
        logger.info(f"Cancelling order {order_id}")
        return await self.request_client.request(
            "DELETE",
            f"{ORDERS_ENDPOINT}/{order_id}",
            params={"AccountKey": account_key},
        )

    async def cancel_all_orders(
        self, account_key: str, uic: int, asset_type: str
    ) -> Any:
        logger.info(f"Cancelling all {asset_type} orders on {uic}")
        return await self.request_client.request(
            "DELETE",
            ORDERS_ENDPOINT,
            params={
                "AccountKey": account_key,
                "AssetType": asset_type,
                "Uic": uic,
            },
        )

    async def pre_check_order(self, request: OrderRequest) -> PreCheckResult:
        """Run the provider's pre-trade check without placing the order"""
        response = await self.request_client.request(
            "POST", f"{ORDERS_ENDPOINT}/precheck", data=request.to_payload()
        )
        return PreCheckResult.model_validate(response)
