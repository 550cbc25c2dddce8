"""Unit tests for order request/response validation models."""

import pytest
from pydantic import ValidationError

from saxopoint.validation import (
    OrderDuration,
    OrderOptions,
    OrderRequest,
    PreCheckResult,
    TokenResponse,
)


def make_request(**overrides) -> OrderRequest:
    values = dict(
        account_key="AK1",
        uic=21,
        asset_type="FxSpot",
        buy_sell="Buy",
        order_type="Limit",
        amount=1000,
        order_price=1.1,
    )
    values.update(overrides)
    return OrderRequest(**values)


def test_order_request_payload_uses_provider_names():
    payload = make_request(
        order_duration=OrderDuration(duration_type="DayOrder")
    ).to_payload()

    assert payload == {
        "AccountKey": "AK1",
        "Uic": 21,
        "AssetType": "FxSpot",
        "BuySell": "Buy",
        "OrderType": "Limit",
        "Amount": 1000.0,
        "OrderPrice": 1.1,
        "OrderDuration": {"DurationType": "DayOrder"},
        "ManualOrder": True,
    }


def test_order_request_accepts_provider_names():
    request = OrderRequest.model_validate(
        {
            "AccountKey": "AK1",
            "Uic": 21,
            "AssetType": "Stock",
            "BuySell": "Sell",
            "OrderType": "Market",
            "Amount": 5,
        }
    )

    assert request.account_key == "AK1"
    assert request.order_price is None


@pytest.mark.parametrize("order_type", ["Limit", "Stop", "StopLimit"])
def test_priced_orders_require_price(order_type):
    with pytest.raises(ValidationError, match="order_price"):
        make_request(order_type=order_type, order_price=None, stop_limit_price=1.0)


def test_stop_limit_requires_stop_limit_price():
    with pytest.raises(ValidationError, match="stop_limit_price"):
        make_request(order_type="StopLimit")


@pytest.mark.parametrize(
    "overrides",
    [
        {"uic": 0},
        {"amount": -1},
        {"buy_sell": "Short"},
        {"asset_type": "Crypto"},
        {"order_price": 0},
    ],
)
def test_order_request_rejects_invalid_fields(overrides):
    with pytest.raises(ValidationError):
        make_request(**overrides)


def test_good_till_date_requires_expiration():
    with pytest.raises(ValidationError):
        OrderDuration(duration_type="GoodTillDate")

    duration = OrderDuration(
        duration_type="GoodTillDate", expiration_date_time="2024-12-31T00:00:00Z"
    )
    assert duration.to_payload() == {
        "DurationType": "GoodTillDate",
        "ExpirationDateTime": "2024-12-31T00:00:00Z",
    }


def test_order_options_defaults():
    options = OrderOptions()

    assert options.manual_order is True
    assert options.to_payload() == {"ManualOrder": True}


def test_order_options_external_reference_length():
    with pytest.raises(ValidationError):
        OrderOptions(external_reference="x" * 51)


def test_pre_check_result_allows_any_subset():
    assert PreCheckResult.model_validate({}).pre_check_result is None

    result = PreCheckResult.model_validate(
        {"PreCheckResult": "Error", "ErrorInfo": {"ErrorCode": "TooFarFromMarket"}}
    )

    assert not result.is_ok
    assert result.model_extra == {"ErrorInfo": {"ErrorCode": "TooFarFromMarket"}}


def test_token_response():
    token = TokenResponse.model_validate(
        {"access_token": "A", "token_type": "Bearer", "expires_in": 1200, "scope": "x"}
    )

    assert token.access_token == "A"
    assert token.model_extra == {"scope": "x"}

    with pytest.raises(ValidationError):
        TokenResponse.model_validate({"access_token": ""})
