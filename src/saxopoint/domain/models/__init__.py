"""Domain models"""

from .balance import Balance
from .order import ORDER_TYPES, SIDES, Order, OrderStatus, OrderType, Side
from .position import ClosedPosition, NetPosition, Position, PositionStatus
from .session import AccountCredentials, Credentials, Session, TokenCredentials

OrderOutcome = Order | Position

__all__ = [
    "AccountCredentials",
    "Balance",
    "ClosedPosition",
    "Credentials",
    "NetPosition",
    "ORDER_TYPES",
    "Order",
    "OrderOutcome",
    "OrderStatus",
    "OrderType",
    "Position",
    "PositionStatus",
    "SIDES",
    "Session",
    "Side",
    "TokenCredentials",
]
