"""Provider order statuses and the transitions between them.

The provider owns order state. This module only gives the gateway and its
callers a shared vocabulary for what they observe: an order is `CREATED`,
the payer approves it in the provider's hosted widget (`APPROVED`), and a
capture moves it to `COMPLETED`.
"""

from typing import Any

CREATED = "CREATED"
SAVED = "SAVED"
APPROVED = "APPROVED"
PAYER_ACTION_REQUIRED = "PAYER_ACTION_REQUIRED"
VOIDED = "VOIDED"
COMPLETED = "COMPLETED"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    CREATED: {APPROVED, PAYER_ACTION_REQUIRED, VOIDED},
    PAYER_ACTION_REQUIRED: {APPROVED, VOIDED},
    SAVED: {APPROVED, COMPLETED, VOIDED},
    APPROVED: {COMPLETED, VOIDED},
    COMPLETED: set(),
    VOIDED: set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the order lifecycle."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


def order_status(payload: Any) -> str:
    """Status reported by a provider order/capture response, or empty string."""

    if not isinstance(payload, dict):
        return ""
    status = payload.get("status")
    return status if isinstance(status, str) else ""


def ensure_captured(payload: Any) -> None:
    """Raise unless the payload reports a completed capture."""

    status = order_status(payload)
    if status != COMPLETED:
        raise ValueError(f"Order not captured: status={status or '<missing>'}")
