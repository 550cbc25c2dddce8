"""Balance domain model"""

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass(frozen=True)
class Balance:
    """Cash and margin snapshot of an account (domain model)"""

    cash_balance: float | None
    cash_available: float | None
    total_value: float | None
    margin_used: float | None
    margin_available: float | None
    unrealized_pnl: float | None
    currency: str | None
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "raw"}
