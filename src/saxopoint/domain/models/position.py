"""Position domain models"""

from dataclasses import dataclass, field, fields
from typing import Any, Literal

PositionStatus = Literal["open", "closed", "closing", "partial", "locked"]


@dataclass(frozen=True)
class Position:
    """Open position (domain model)

    ``raw`` is the provider record the position was normalized from. It is
    kept for diagnostics and order reconciliation only and is excluded from
    equality, hashing, repr and to_dict().
    """

    id: str
    uic: int
    client_id: str | None
    account_id: str | None
    order_id: str | None
    status: str
    quantity: float
    price: float | None
    value: float | None
    currency: str | None
    kind: Literal["position"] = field(default="position", init=False)
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "raw"}


@dataclass(frozen=True)
class NetPosition(Position):
    """Net position aggregated per instrument (domain model)"""

    kind: Literal["net_position"] = field(default="net_position", init=False)  # type: ignore[assignment]
    asset_type: str | None = None


@dataclass(frozen=True)
class ClosedPosition(Position):
    """Closed position (domain model), status is always "closed" """

    kind: Literal["closed_position"] = field(default="closed_position", init=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", "closed")
