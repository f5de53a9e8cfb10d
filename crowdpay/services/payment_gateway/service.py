"""Payment provider calls behind the gateway routes.

Every gateway invocation exchanges the client credentials for a fresh bearer
token and then makes exactly one dependent call (create or capture). Nothing
is cached, retried, or kept between invocations; the provider owns all order
state.
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from crowdpay.common.config import CommonSettings
from crowdpay.common.logging import logger
from crowdpay.common.metrics import provider_request_duration_seconds, provider_requests_total
from crowdpay.common.order_lifecycle import order_status


PAYPAL_SANDBOX_URL = "https://api-m.sandbox.paypal.com"

TOKEN_FAILED = "Failed to get PayPal access token"
CREATE_FAILED = "Failed to create PayPal order"
CAPTURE_FAILED = "Failed to capture PayPal payment"


class ProviderError(Exception):
    """Provider call failed; the message is safe to return to clients."""


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and endpoint the gateway talks to."""

    client_id: str
    client_secret: str
    base_url: str = PAYPAL_SANDBOX_URL
    timeout_seconds: float | None = None

    @classmethod
    def from_settings(cls, settings: CommonSettings) -> "ProviderConfig":
        # The provider environment is fixed to sandbox; only credentials come from env.
        return cls(
            client_id=settings.paypal_client_id,
            client_secret=settings.paypal_client_secret,
            timeout_seconds=settings.paypal_timeout_seconds,
        )


def _decode(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class PaymentGatewayService:
    """Creates and captures provider orders on behalf of the web client."""

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        service_name: str = "payment-gateway",
    ) -> None:
        self.config = config
        self.transport = transport
        self.service_name = service_name

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            transport=self.transport,
            timeout=self.config.timeout_seconds,
        )

    async def _post(
        self,
        client: httpx.AsyncClient,
        operation: str,
        failure_message: str,
        url: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """POST to the provider; raise `ProviderError` on anything but a 2xx JSON object."""

        with provider_request_duration_seconds.labels(service=self.service_name, operation=operation).time():
            try:
                resp = await client.post(url, **kwargs)
            except httpx.HTTPError as exc:
                provider_requests_total.labels(
                    service=self.service_name, operation=operation, outcome="transport_error"
                ).inc()
                logger.error("provider_transport_error operation=%s error=%r", operation, exc)
                raise ProviderError(failure_message) from exc

        payload = _decode(resp)
        if not resp.is_success or not isinstance(payload, dict):
            provider_requests_total.labels(
                service=self.service_name, operation=operation, outcome="rejected"
            ).inc()
            logger.error(
                "provider_rejected operation=%s status_code=%s payload=%s",
                operation,
                resp.status_code,
                payload,
            )
            raise ProviderError(failure_message)

        provider_requests_total.labels(service=self.service_name, operation=operation, outcome="ok").inc()
        return payload

    async def get_access_token(self, client: httpx.AsyncClient) -> str:
        """Client-credentials exchange with HTTP Basic auth."""

        payload = await self._post(
            client,
            "token",
            TOKEN_FAILED,
            "/v1/oauth2/token",
            auth=(self.config.client_id, self.config.client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        token = payload.get("access_token")
        if not isinstance(token, str) or not token:
            logger.error("provider token response without access_token keys=%s", sorted(payload))
            raise ProviderError(TOKEN_FAILED)
        return token

    async def create_order(self, amount: str, campaign_id: str) -> dict[str, Any]:
        """Create a capture-on-approval order for one campaign donation."""

        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {"currency_code": "USD", "value": amount},
                    "description": f"Donation to campaign: {campaign_id}",
                    "custom_id": campaign_id,
                }
            ],
        }
        async with self._client() as client:
            token = await self.get_access_token(client)
            order = await self._post(
                client,
                "create_order",
                CREATE_FAILED,
                "/v2/checkout/orders",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
        logger.info(
            "order_created order_id=%s status=%s amount=%s",
            order.get("id"),
            order_status(order),
            amount,
        )
        return order

    async def capture_payment(self, order_id: str) -> dict[str, Any]:
        """Capture a payer-approved order.

        No idempotency key is sent: a repeated capture is a second provider
        call, and the provider decides whether to reject it.
        """

        async with self._client() as client:
            token = await self.get_access_token(client)
            capture = await self._post(
                client,
                "capture",
                CAPTURE_FAILED,
                f"/v2/checkout/orders/{quote(order_id, safe='')}/capture",
                headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            )
        logger.info("order_captured order_id=%s status=%s", order_id, order_status(capture))
        return capture
