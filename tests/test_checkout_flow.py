"""Helpers of the operator checkout script."""

import pytest

from scripts.checkout_flow import approval_link, check_capture


@pytest.mark.parametrize("rel", ["approve", "payer-action"])
def test_approval_link(rel):
    order = {
        "id": "o1",
        "links": [
            {"href": "https://api.paypal.test/v2/checkout/orders/o1", "rel": "self"},
            {"href": "https://www.paypal.test/checkoutnow?token=o1", "rel": rel},
        ],
    }

    assert approval_link(order) == "https://www.paypal.test/checkoutnow?token=o1"


def test_approval_link_missing():
    assert approval_link({"id": "o1"}) is None
    assert approval_link({"id": "o1", "links": [{"href": "https://x", "rel": "self"}]}) is None


def test_check_capture_accepts_completed():
    assert check_capture({"id": "o1", "status": "COMPLETED"}) == "COMPLETED"


@pytest.mark.parametrize("status", ["CREATED", "APPROVED", None])
def test_check_capture_rejects_uncaptured(status):
    with pytest.raises(ValueError, match="Invalid transition"):
        check_capture({"id": "o1", "status": status})


def test_check_capture_rejects_voided_order():
    with pytest.raises(ValueError, match="not captured"):
        check_capture({"id": "o1", "status": "VOIDED"})
