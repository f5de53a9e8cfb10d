"""Shared fixtures: a scripted fake provider wired into the gateway app."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from crowdpay.services.payment_gateway.main import app, get_gateway
from crowdpay.services.payment_gateway.service import PaymentGatewayService, ProviderConfig


FAKE_BASE_URL = "https://paypal.test"


class FakePayPal:
    """Records outbound provider calls and replays canned responses."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.token_status = 200
        self.token_payload = {"access_token": "A21AA-test-token", "token_type": "Bearer", "expires_in": 32400}
        self.order_status = 201
        self.order_payload = {
            "id": "5O190127TN364715T",
            "status": "CREATED",
            "links": [
                {"href": "https://www.sandbox.paypal.com/checkoutnow?token=5O190127TN364715T", "rel": "approve"}
            ],
        }
        self.capture_status = 201
        self.capture_payload = {
            "id": "o1",
            "status": "COMPLETED",
            "purchase_units": [
                {
                    "reference_id": "default",
                    "payments": {
                        "captures": [
                            {"id": "3C679366HH908993F", "status": "COMPLETED", "amount": {"currency_code": "USD", "value": "25.00"}}
                        ]
                    },
                }
            ],
        }
        self.fail_with: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        path = request.url.path
        if path == "/v1/oauth2/token":
            return httpx.Response(self.token_status, json=self.token_payload)
        if path == "/v2/checkout/orders":
            return httpx.Response(self.order_status, json=self.order_payload)
        if path.endswith("/capture"):
            return httpx.Response(self.capture_status, json=self.capture_payload)
        return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})

    def paths(self) -> list[str]:
        return [call.url.path for call in self.calls]

    def json_body(self, index: int) -> dict:
        return json.loads(self.calls[index].content)


@pytest.fixture
def paypal() -> FakePayPal:
    return FakePayPal()


@pytest.fixture
def gateway(paypal: FakePayPal) -> PaymentGatewayService:
    config = ProviderConfig(client_id="client-id", client_secret="client-secret", base_url=FAKE_BASE_URL)
    return PaymentGatewayService(config, transport=httpx.MockTransport(paypal.handler))


@pytest.fixture
def client(gateway: PaymentGatewayService):
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
