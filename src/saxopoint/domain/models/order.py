"""Order domain model"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Literal

Side = Literal["buy", "sell"]
OrderType = Literal["market", "limit", "stop", "stop_limit"]
OrderStatus = Literal["filled", "working", "parked"]

ORDER_TYPES: tuple[str, ...] = ("market", "limit", "stop", "stop_limit")
SIDES: tuple[str, ...] = ("buy", "sell")


@dataclass(frozen=True)
class Order:
    """Pending or historical order (domain model)

    ``raw`` holds the provider record for diagnostics; it never takes part
    in equality, hashing, repr or to_dict().
    """

    id: str
    time: datetime | None
    uic: int
    type: str
    order_type: str
    status: str
    price: float | None
    quantity: float
    client_id: str | None
    account_id: str | None
    exchange_id: str | None
    asset_type: str | None = None
    external_reference: str | None = None
    kind: Literal["order"] = field(default="order", init=False)
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def is_working(self) -> bool:
        return self.status == "working"

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "raw"}
