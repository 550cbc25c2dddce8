"""Response normalization: OpenAPI payloads to domain entities

Each entity kind has its own mapping table (field name -> provider path).
Paths are dotted for nested sub-objects; a tuple lists accepted
alternatives, first present wins. Entity kinds name equivalent values
differently (e.g. PositionBase.OpenPrice vs NetPositionBase.AverageOpenPrice),
so nothing is inferred generically.
"""

import re
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

from saxopoint.domain.models import (
    Balance,
    ClosedPosition,
    NetPosition,
    Order,
    Position,
)
from saxopoint.shared.exceptions import ApiError

T = TypeVar("T")

Path = str | tuple[str, ...]

POSITION_FIELDS: dict[str, Path] = {
    "id": "PositionId",
    "uic": "PositionBase.Uic",
    "account_id": "PositionBase.AccountId",
    "order_id": "PositionBase.SourceOrderId",
    "status": "PositionBase.Status",
    "quantity": "PositionBase.Amount",
    "price": "PositionBase.OpenPrice",
    "value": "PositionView.CurrentPrice",
    "currency": "PositionView.ExposureCurrency",
}

NET_POSITION_FIELDS: dict[str, Path] = {
    "id": "NetPositionId",
    "uic": "NetPositionBase.Uic",
    "account_id": "NetPositionBase.AccountId",
    "status": "NetPositionBase.Status",
    "quantity": "NetPositionBase.Amount",
    "price": "NetPositionBase.AverageOpenPrice",
    "value": "NetPositionView.MarketValue",
    "currency": "NetPositionView.ExposureCurrency",
    "asset_type": "NetPositionBase.AssetType",
}

CLOSED_POSITION_FIELDS: dict[str, Path] = {
    "id": ("ClosedPositionUniqueId", "PositionId"),
    "uic": "PositionBase.Uic",
    "account_id": "PositionBase.AccountId",
    "order_id": "PositionBase.SourceOrderId",
    "quantity": "PositionBase.Amount",
    "price": "PositionBase.OpenPrice",
    "value": "PositionView.ProfitLoss",
    "currency": "PositionView.ExposureCurrency",
}

ORDER_FIELDS: dict[str, Path] = {
    "id": "OrderId",
    "time": "OrderTime",
    "uic": "Uic",
    "type": "BuySell",
    "order_type": ("OpenOrderType", "OrderType"),
    "status": "Status",
    "price": "Price",
    "quantity": "Amount",
    "client_id": "ClientId",
    "account_id": "AccountId",
    "exchange_id": "Exchange.ExchangeId",
    "asset_type": "AssetType",
    "external_reference": "ExternalReference",
}

BALANCE_FIELDS: dict[str, Path] = {
    "cash_balance": "CashBalance",
    "cash_available": "CashAvailableForTrading",
    "total_value": "TotalValue",
    "margin_used": "MarginUsedByCurrentPositions",
    "margin_available": "MarginAvailableForTrading",
    "unrealized_pnl": "UnrealizedMarginProfitLoss",
    "currency": "Currency",
}

ACCOUNT_FIELDS: dict[str, Path] = {
    "id": "AccountId",
    "key": "AccountKey",
    "active": "Active",
    "currency": "Currency",
}

CLIENT_FIELDS: dict[str, Path] = {
    "id": "ClientId",
    "key": "ClientKey",
    "name": "Name",
}

# Unrecognized provider values pass through unchanged
ORDER_TYPE_NAMES = {
    "Market": "market",
    "Limit": "limit",
    "Stop": "stop",
    "StopLimit": "stop_limit",
}

ORDER_STATUS_NAMES = {
    "Filled": "filled",
    "Working": "working",
    "Parked": "parked",
}

POSITION_STATUS_NAMES = {
    "Open": "open",
    "Closed": "closed",
    "Closing": "closing",
    "PartiallyClosed": "partial",
    "Locked": "locked",
}

_FRACTION = re.compile(r"(\.\d{6})\d+")


def classify_error(payload: Any, status_code: int | None = None) -> Any:
    """Raise ApiError for provider error payloads, return anything else

    Two mutually exclusive error shapes exist: a top-level
    {ErrorCode, Message, ModelState} and a nested {ErrorInfo: {...}}.

    Raises:
        ApiError: If payload matches either error shape
    """
    if not isinstance(payload, dict):
        return payload

    if payload.get("ErrorCode"):
        raise ApiError(
            code=str(payload["ErrorCode"]),
            message=payload.get("Message") or "",
            model_state=payload.get("ModelState"),
            status_code=status_code,
        )

    error_info = payload.get("ErrorInfo")
    if isinstance(error_info, dict) and error_info.get("ErrorCode"):
        raise ApiError(
            code=str(error_info["ErrorCode"]),
            message=error_info.get("Message") or "",
            status_code=status_code,
        )

    return payload


def pluck(record: Any, path: Path) -> Any:
    """Read a dotted path from a nested record, None when absent"""
    alternatives = (path,) if isinstance(path, str) else path
    for alternative in alternatives:
        value: Any = record
        for key in alternative.split("."):
            if not isinstance(value, dict) or key not in value:
                break
            value = value[key]
        else:
            return value
    return None


def extract(record: dict[str, Any], table: dict[str, Path]) -> dict[str, Any]:
    return {name: pluck(record, path) for name, path in table.items()}


def translate(value: Any, names: dict[str, str]) -> Any:
    if isinstance(value, str):
        return names.get(value, value)
    return value


def parse_time(value: Any) -> datetime | None:
    """Parse an OpenAPI timestamp (ISO 8601, up to 7 fraction digits)"""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(_FRACTION.sub(r"\1", str(value)))
    except ValueError:
        logger.warning(f"Unparseable timestamp from provider: {value!r}")
        return None


def normalize_position(
    record: dict[str, Any], client_id: str | None
) -> Position:
    values = extract(record, POSITION_FIELDS)
    values["status"] = translate(values["status"], POSITION_STATUS_NAMES)
    return Position(client_id=client_id, raw=record, **values)


def normalize_net_position(
    record: dict[str, Any], client_id: str | None
) -> NetPosition:
    values = extract(record, NET_POSITION_FIELDS)
    values["status"] = translate(values["status"], POSITION_STATUS_NAMES)
    return NetPosition(client_id=client_id, order_id=None, raw=record, **values)


def normalize_closed_position(
    record: dict[str, Any], client_id: str | None
) -> ClosedPosition:
    values = extract(record, CLOSED_POSITION_FIELDS)
    return ClosedPosition(
        client_id=client_id, status="closed", raw=record, **values
    )


def normalize_order(record: dict[str, Any]) -> Order:
    values = extract(record, ORDER_FIELDS)
    values["time"] = parse_time(values["time"])
    if isinstance(values["type"], str):
        values["type"] = values["type"].lower()
    values["order_type"] = translate(values["order_type"], ORDER_TYPE_NAMES)
    values["status"] = translate(values["status"], ORDER_STATUS_NAMES)
    return Order(raw=record, **values)


def normalize_balance(record: dict[str, Any]) -> Balance:
    return Balance(raw=record, **extract(record, BALANCE_FIELDS))


def normalize_list(
    payload: Any, normalize: Callable[[dict[str, Any]], T]
) -> list[T]:
    """Normalize a {"Data": [...]} list payload, [] when there is no Data"""
    if not isinstance(payload, dict):
        return []
    records = payload.get("Data") or []
    return [normalize(record) for record in records]


def unwrap_order_record(payload: Any) -> dict[str, Any] | None:
    """Return the single order record of an order-by-id response, if any"""
    if not isinstance(payload, dict):
        return None
    if payload.get("OrderId"):
        return payload
    records = payload.get("Data")
    if isinstance(records, list) and records and isinstance(records[0], dict):
        return records[0]
    return None


def source_order_id(position: Position) -> Any:
    """Order id that opened a position, read from its raw provider record"""
    return pluck(position.raw, "PositionBase.SourceOrderId")
