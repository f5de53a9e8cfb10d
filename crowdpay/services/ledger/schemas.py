"""Donation rows written to the hosted ledger by the calling layer."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from crowdpay.common.order_lifecycle import ensure_captured


ANONYMOUS_DONOR = "anonymous"


class DonationRecord(BaseModel):
    """One row of the ledger's `donations` table."""

    campaign_id: str = Field(min_length=1)
    donor_id: str | None = None
    amount: Decimal = Field(gt=0)
    payment_id: str = Field(min_length=1)
    anonymous: bool = False
    message: str | None = None


def captured_amount(capture: dict[str, Any]) -> Decimal | None:
    """Amount of the first capture of the first purchase unit, if reported."""

    units = capture.get("purchase_units") or [{}]
    captures = (units[0].get("payments") or {}).get("captures") or [{}]
    value = (captures[0].get("amount") or {}).get("value")
    return Decimal(value) if value is not None else None


def donation_from_capture(
    capture: dict[str, Any],
    campaign_id: str,
    user_id: str | None,
    amount: Decimal | str | None = None,
    anonymous: bool = False,
    message: str | None = None,
) -> DonationRecord:
    """Build the donation row for a completed capture.

    `anonymous` only hides the donor on display; a signed-in donor keeps their
    id. Raises `ValueError` when the capture is not completed, or carries no
    id, or no amount can be determined.
    """

    ensure_captured(capture)
    if amount is None:
        amount = captured_amount(capture)
    if amount is None:
        raise ValueError("capture response carries no amount")
    payment_id = capture.get("id")
    if not payment_id:
        raise ValueError("capture response carries no id")

    donor_id = None if not user_id or user_id == ANONYMOUS_DONOR else user_id
    return DonationRecord(
        campaign_id=campaign_id,
        donor_id=donor_id,
        amount=Decimal(str(amount)),
        payment_id=payment_id,
        anonymous=anonymous,
        message=message or None,
    )
