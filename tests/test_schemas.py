"""Gateway request parsing and amount normalization."""

import pytest
from pydantic import ValidationError

from crowdpay.services.payment_gateway.schemas import OrderCaptureRequest, OrderCreationRequest, format_amount


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("25", "25"), (" 25.50 ", "25.50"), (25, "25"), (25.0, "25"), (10.5, "10.5"), ("0.01", "0.01")],
)
def test_format_amount(raw, expected):
    assert format_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, True, "", "abc", "0", 0, -5, "-1", float("nan"), float("inf"), [25], {}])
def test_format_amount_rejects(raw):
    with pytest.raises(ValueError):
        format_amount(raw)


def test_creation_request_reads_wire_names():
    req = OrderCreationRequest.model_validate({"amount": 25, "campaignId": "c1", "userId": "ignored"})
    assert req.amount == "25"
    assert req.campaign_id == "c1"


def test_numeric_identifiers_are_coerced():
    req = OrderCaptureRequest.model_validate({"orderId": "o1", "campaignId": 42, "userId": 7})
    assert (req.order_id, req.campaign_id, req.user_id) == ("o1", "42", "7")


def test_capture_request_requires_all_ids():
    with pytest.raises(ValidationError):
        OrderCaptureRequest.model_validate({"orderId": "o1", "campaignId": "c1", "userId": ""})
