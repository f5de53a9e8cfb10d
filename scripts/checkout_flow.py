"""Drive one donation end to end the way the web client does.

Creates an order through the gateway, prints the payer approval link, waits
for the operator to approve it in the provider's hosted page, captures it,
and optionally records the donation in the ledger.
"""

import argparse
import asyncio
import json

import httpx

from crowdpay.common.config import settings
from crowdpay.common.order_lifecycle import APPROVED, ensure_captured, order_status, validate_transition
from crowdpay.services.ledger.schemas import ANONYMOUS_DONOR, donation_from_capture
from crowdpay.services.ledger.service import LedgerClient


def approval_link(order: dict) -> str | None:
    """Return the payer approval URL from a created order's HATEOAS links."""

    for link in order.get("links", []):
        if link.get("rel") in ("approve", "payer-action"):
            return link.get("href")
    return None


def check_capture(capture: dict) -> str:
    """Return the capture status; raise `ValueError` unless approval led to it."""

    status = order_status(capture)
    validate_transition(APPROVED, status)
    ensure_captured(capture)
    return status


async def run(args: argparse.Namespace) -> None:
    base = args.gateway_url.rstrip("/")
    async with httpx.AsyncClient(timeout=30.0) as client:
        resp = await client.post(
            f"{base}/create-order",
            json={"amount": args.amount, "campaignId": args.campaign_id},
        )
        resp.raise_for_status()
        order = resp.json()
        print(f"order_id={order.get('id')} status={order_status(order)}")
        print(f"approve at: {approval_link(order) or '<no approval link>'}")

        await asyncio.to_thread(input, "Press Enter once the payer has approved the order... ")

        resp = await client.post(
            f"{base}/capture-payment",
            json={"orderId": order["id"], "campaignId": args.campaign_id, "userId": args.user_id},
        )
        resp.raise_for_status()
        capture = resp.json()

    check_capture(capture)
    print(json.dumps(capture, indent=2))

    if not args.record:
        return
    record = donation_from_capture(
        capture,
        campaign_id=args.campaign_id,
        user_id=args.user_id,
        amount=args.amount,
        anonymous=args.anonymous,
        message=args.message,
    )
    ledger = LedgerClient(args.ledger_url, settings.ledger_api_key)
    await ledger.record_donation(record)
    print(f"recorded donation payment_id={record.payment_id} amount={record.amount}")


def main() -> None:
    """CLI entrypoint for a manual checkout against the sandbox."""

    parser = argparse.ArgumentParser(description="Create, approve, and capture one donation.")
    parser.add_argument("--gateway-url", default=settings.gateway_url)
    parser.add_argument("--ledger-url", default=settings.ledger_url)
    parser.add_argument("--campaign-id", required=True)
    parser.add_argument("--amount", required=True)
    parser.add_argument("--user-id", default=ANONYMOUS_DONOR)
    parser.add_argument("--anonymous", action="store_true")
    parser.add_argument("--message", default=None)
    parser.add_argument("--record", action="store_true", help="Write the donation into the ledger")
    args = parser.parse_args()
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
