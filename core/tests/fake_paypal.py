import json
from typing import List, Optional

import httpx

from core.paypal_service import PayPalService

SANDBOX_URL = "https://api-m.sandbox.paypal.com"


class FakePayPal:
    """httpx transport handler answering like the PayPal sandbox."""

    def __init__(
        self,
        capture_status: str = "COMPLETED",
        amount: str = "50.00",
        order_id: str = "5O190127TN364715T",
        token_status: int = 200,
        order_status: int = 201,
    ):
        self.capture_status = capture_status
        self.amount = amount
        self.order_id = order_id
        self.token_status = token_status
        self.order_status = order_status
        self.requests: List[httpx.Request] = []
        self.order_payload: Optional[dict] = None

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/oauth2/token":
            if self.token_status != 200:
                return httpx.Response(
                    self.token_status,
                    json={
                        "error": "invalid_client",
                        "error_description": "Client Authentication failed",
                    },
                )
            return httpx.Response(
                200,
                json={
                    "scope": "https://uri.paypal.com/services/payments/payment",
                    "access_token": "A21AAFakeAccessToken",
                    "token_type": "Bearer",
                    "expires_in": 32400,
                },
            )

        if path == "/v2/checkout/orders":
            self.order_payload = json.loads(request.content)
            if self.order_status >= 400:
                return httpx.Response(
                    self.order_status,
                    json={"name": "INVALID_REQUEST", "message": "Request is not well-formed"},
                )
            return httpx.Response(
                self.order_status,
                json={
                    "id": self.order_id,
                    "status": "CREATED",
                    "links": [
                        {
                            "href": f"{SANDBOX_URL}/v2/checkout/orders/{self.order_id}",
                            "rel": "self",
                            "method": "GET",
                        },
                        {
                            "href": f"https://www.sandbox.paypal.com/checkoutnow?token={self.order_id}",
                            "rel": "approve",
                            "method": "GET",
                        },
                    ],
                },
            )

        if path.endswith("/capture"):
            order_id = path.split("/")[-2]
            if self.capture_status == "UNPROCESSABLE":
                return httpx.Response(
                    422,
                    json={
                        "name": "UNPROCESSABLE_ENTITY",
                        "details": [{"issue": "ORDER_NOT_APPROVED"}],
                    },
                )
            return httpx.Response(
                201,
                json={
                    "id": order_id,
                    "status": self.capture_status,
                    "payer": {"payer_id": "QYR5Z8XDVJNXQ"},
                    "purchase_units": [
                        {
                            "reference_id": "default",
                            "payments": {
                                "captures": [
                                    {
                                        "id": "3C679366HH908993F",
                                        "status": self.capture_status,
                                        "amount": {
                                            "currency_code": "EUR",
                                            "value": self.amount,
                                        },
                                    }
                                ]
                            },
                        }
                    ],
                },
            )

        return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})


def build_paypal_service(fake: FakePayPal) -> PayPalService:
    return PayPalService(
        client_id="test-client-id",
        client_secret="test-client-secret",
        base_url=SANDBOX_URL,
        return_url="http://localhost:8000/api/paypal/success",
        cancel_url="http://localhost:8000/api/paypal/cancel",
        transport=httpx.MockTransport(fake),
    )
