"""Pydantic models for order placement and pre-trade checks

The OpenAPI speaks PascalCase; these models accept snake_case (or the
provider's own names) and dump back to the provider's field names.
"""

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_pascal

AssetType = Literal[
    "FxSpot",
    "FxForward",
    "FxVanillaOption",
    "FxKnockInOption",
    "FxKnockOutOption",
    "FxOneTouchOption",
    "FxNoTouchOption",
    "FxBinaryOption",
    "Stock",
    "StockOption",
    "StockIndex",
    "StockIndexOption",
    "Bond",
    "ContractFutures",
    "FuturesOption",
    "FuturesStrategy",
    "CfdOnStock",
    "CfdOnIndex",
    "CfdOnFutures",
    "CfdOnEtf",
    "CfdOnEtc",
    "CfdOnEtn",
    "CfdOnFund",
    "CfdIndexOption",
    "Etc",
    "Etf",
    "Etn",
    "Fund",
    "MutualFund",
]

DurationType = Literal[
    "DayOrder",
    "GoodTillCancel",
    "FillOrKill",
    "ImmediateOrCancel",
    "GoodTillDate",
]


class _ProviderModel(BaseModel):
    """Base for models exchanged with the OpenAPI"""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Dump to the provider's JSON body, leaving out unset fields"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class OrderDuration(_ProviderModel):
    """How long an order stays working"""

    duration_type: DurationType = Field(
        "GoodTillCancel", description="Duration type"
    )
    expiration_date_time: str | None = Field(
        None, description="Expiry (GoodTillDate only), ISO 8601"
    )

    @model_validator(mode="after")
    def validate_expiration(self):
        """GoodTillDate orders need an expiration"""
        if (
            self.duration_type == "GoodTillDate"
            and self.expiration_date_time is None
        ):
            raise ValueError("GoodTillDate requires expiration_date_time")
        return self


class OrderOptions(_ProviderModel):
    """Optional order fields, passed through only when provided"""

    asset_type: AssetType | None = Field(None, description="Asset type")
    duration: OrderDuration | None = Field(
        None, description="Order duration (ignored for market orders)"
    )
    external_reference: str | None = Field(
        None, max_length=50, description="Caller supplied reference"
    )
    manual_order: bool = Field(
        True, description="Order placed by a person, not an algorithm"
    )
    is_force_open: bool | None = Field(
        None, description="Open a new position instead of netting"
    )
    trailing_stop_distance_to_market: float | None = Field(
        None, gt=0, description="Trailing stop distance"
    )
    trailing_stop_step: float | None = Field(
        None, gt=0, description="Trailing stop step"
    )


class OrderRequest(_ProviderModel):
    """Request model for POST /trade/v2/orders/precheck"""

    account_key: str = Field(..., min_length=1, description="Account key")
    uic: int = Field(..., gt=0, description="Instrument identifier")
    asset_type: AssetType = Field(..., description="Asset type")
    buy_sell: Literal["Buy", "Sell"] = Field(..., description="Order side")
    order_type: Literal["Market", "Limit", "Stop", "StopLimit"] = Field(
        ..., description="Order type"
    )
    amount: float = Field(..., gt=0, description="Order quantity")
    order_price: float | None = Field(
        None, gt=0, validate_default=True, description="Limit/stop price"
    )
    stop_limit_price: float | None = Field(
        None, gt=0, description="Limit price of a stop-limit order"
    )
    order_duration: OrderDuration | None = Field(
        None, description="Order duration"
    )
    manual_order: bool = Field(True, description="Manually placed order")
    external_reference: str | None = Field(
        None, max_length=50, description="Caller supplied reference"
    )

    @field_validator("order_price")
    @classmethod
    def validate_order_price(cls, v, info):
        """Validate a price is provided for priced orders"""
        order_type = info.data.get("order_type")
        if order_type in ("Limit", "Stop", "StopLimit") and v is None:
            raise ValueError(f"order_price is required for {order_type} orders")
        return v

    @model_validator(mode="after")
    def validate_stop_limit_price(self):
        """StopLimit orders need both prices"""
        if self.order_type == "StopLimit" and self.stop_limit_price is None:
            raise ValueError("stop_limit_price is required for StopLimit orders")
        return self


class PreCheckResult(_ProviderModel):
    """Pre-trade check response; the provider may return any subset"""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="allow",
    )

    pre_check_result: str | None = Field(None, description="Ok or a reason")
    estimated_cash_required: float | None = Field(
        None, description="Cash needed to place the order"
    )
    estimated_cash_required_currency: str | None = Field(
        None, description="Currency of estimated_cash_required"
    )
    cost: dict[str, Any] | None = Field(None, description="Cost breakdown")
    margin_impact_buy_sell: dict[str, Any] | None = Field(
        None, description="Margin impact of the order"
    )
    instrument_to_account_conversion_rate: float | None = Field(
        None, description="Instrument to account currency rate"
    )

    @property
    def is_ok(self) -> bool:
        return self.pre_check_result == "Ok"
