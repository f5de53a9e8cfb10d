"""Request schemas for the payment gateway routes.

Field names follow the web client's camelCase wire format. Identifiers sent
as JSON numbers are accepted and coerced to strings.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


CREATE_ORDER_REQUIRED = "Amount and campaignId are required"
CAPTURE_PAYMENT_REQUIRED = "OrderId, campaignId, and userId are required"


def format_amount(value: Any) -> str:
    """Normalize a donation amount to the decimal string sent to the provider.

    Strings pass through trimmed, integers and integral floats lose their
    fractional part (``25.0`` -> ``"25"``). Raises ``ValueError`` unless the
    result is a finite positive number.
    """

    if value is None or isinstance(value, bool):
        raise ValueError("amount is required")
    if isinstance(value, str):
        text = value.strip()
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, float):
        text = str(int(value)) if value.is_integer() else repr(value)
    else:
        raise ValueError("amount must be a number")

    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError("amount must be a number") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValueError("amount must be positive")
    return text


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")


class OrderCreationRequest(_WireModel):
    """Payload accepted by `POST .../create-order`."""

    amount: str
    campaign_id: str = Field(alias="campaignId", min_length=1)

    @field_validator("amount", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Any) -> str:
        return format_amount(value)


class OrderCaptureRequest(_WireModel):
    """Payload accepted by `POST .../capture-payment`."""

    order_id: str = Field(alias="orderId", min_length=1)
    campaign_id: str = Field(alias="campaignId", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
