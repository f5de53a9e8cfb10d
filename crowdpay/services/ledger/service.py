"""Client for the hosted campaign/donation ledger.

The gateway never calls this: after a successful capture the caller inserts
the donation row and then asks the ledger to bump the campaign total. The two
writes are not transactional with the capture, and nothing reconciles them
if the second one fails.
"""

from decimal import Decimal

import httpx

from crowdpay.common.logging import logger
from crowdpay.services.ledger.schemas import DonationRecord


class LedgerError(Exception):
    """A ledger write was rejected or could not be delivered."""


class LedgerClient:
    """Writes donation rows through the ledger's REST interface."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.transport = transport
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self.transport,
            timeout=self.timeout,
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def _post(self, client: httpx.AsyncClient, url: str, payload: dict, what: str) -> None:
        try:
            resp = await client.post(url, json=payload, headers={"Prefer": "return=minimal"})
        except httpx.HTTPError as exc:
            logger.error("ledger_transport_error op=%s error=%r", what, exc)
            raise LedgerError(f"{what} failed") from exc
        if resp.is_error:
            logger.error("ledger_rejected op=%s status_code=%s body=%s", what, resp.status_code, resp.text)
            raise LedgerError(f"{what} failed with status {resp.status_code}")

    async def insert_donation(self, record: DonationRecord) -> None:
        """Insert one row into `donations`."""

        async with self._client() as client:
            await self._post(client, "/rest/v1/donations", record.model_dump(mode="json"), "insert_donation")

    async def increment_campaign_amount(self, campaign_id: str, amount: Decimal) -> None:
        """Atomically add `amount` to the campaign's accumulated total."""

        async with self._client() as client:
            await self._post(
                client,
                "/rest/v1/rpc/increment_campaign_amount",
                {"p_campaign_id": campaign_id, "p_amount": str(amount)},
                "increment_campaign_amount",
            )

    async def record_donation(self, record: DonationRecord) -> None:
        """Insert the donation, then increment the campaign total."""

        await self.insert_donation(record)
        await self.increment_campaign_amount(record.campaign_id, record.amount)
        logger.info(
            "donation_recorded campaign_id=%s payment_id=%s amount=%s",
            record.campaign_id,
            record.payment_id,
            record.amount,
        )
