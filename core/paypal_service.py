from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import traceback
from typing import Any, Dict, List, Optional

import httpx

from core.exceptions import (
    ConfigurationError,
    PaymentNotCompletedError,
    UpstreamError,
    ValidationError,
)
from core.log import logger
from settings import (
    API_BASE_URL,
    PAYPAL_API_URL,
    PAYPAL_BRAND_NAME,
    PAYPAL_CLIENT_ID,
    PAYPAL_CLIENT_SECRET,
    PAYPAL_CURRENCY,
    PAYPAL_TIMEOUT_SECONDS,
)

COMPLETED = "COMPLETED"


@dataclass
class PayPalOrder:
    order_id: str
    status: Optional[str] = None
    links: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def approve_link(self) -> Optional[str]:
        for link in self.links:
            if link.get("rel") in ("approve", "payer-action"):
                return link.get("href")
        return None


@dataclass
class PayPalCapture:
    order_id: str
    status: str
    amount: Decimal
    currency: Optional[str] = None
    payer_id: Optional[str] = None


def _to_amount(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Invalid amount")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Invalid amount")
    return amount


class PayPalService:
    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        base_url: str = "https://api-m.sandbox.paypal.com",
        return_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
        currency: str = "EUR",
        brand_name: str = "Sponk Keramik",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not client_id or not client_secret:
            logger.error(
                f"PayPal credentials missing! PAYPAL_CLIENT_ID: {'SET' if client_id else 'MISSING'}, "
                f"PAYPAL_CLIENT_SECRET: {'SET' if client_secret else 'MISSING'}"
            )
            raise ConfigurationError("PayPal credentials not configured")
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.return_url = return_url
        self.cancel_url = cancel_url
        self.currency = currency
        self.brand_name = brand_name
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    async def get_access_token(self) -> str:
        """
        Exchange the client credentials for a bearer token.

        Returns:
            The access token string.

        Raises:
            UpstreamError: PayPal refused the credentials or was unreachable
        """
        endpoint = f"{self.base_url}/v1/oauth2/token"

        try:
            async with self._client() as client:
                response = await client.post(
                    endpoint,
                    auth=(self.client_id, self.client_secret),
                    data={"grant_type": "client_credentials"},
                    headers={"Accept": "application/json"},
                )
        except httpx.RequestError as e:
            logger.error(f"Request to PayPal token endpoint failed: {e}")
            raise UpstreamError("PayPal authentication failed", details=str(e))

        data = _json_or_text(response)
        if response.is_error or not isinstance(data, dict) or not data.get(
            "access_token"
        ):
            logger.error(
                f"PayPal authentication failed: status:{response.status_code} {data}"
            )
            raise UpstreamError(
                "PayPal authentication failed",
                details=data,
                upstream_status=response.status_code,
            )

        logger.debug("PayPal authentication successful")
        return data["access_token"]

    async def create_order(self, amount: Any) -> PayPalOrder:
        """
        Create a CAPTURE intent order for a voucher of the given amount.

        Args:
            amount: Voucher value, must be greater than zero

        Returns:
            PayPalOrder with the provider order id and its HATEOAS links

        Raises:
            ValidationError: amount missing or not positive, nothing is sent
            UpstreamError: PayPal answered with a non-2xx status
        """
        if amount is None:
            raise ValidationError("Invalid amount")
        value = _to_amount(amount)

        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": self.currency,
                        "value": _format_amount(value),
                    },
                    "description": f"{self.brand_name} Gutschein {_format_amount(value)}€",
                }
            ],
            "application_context": {
                "brand_name": self.brand_name,
                "landing_page": "NO_PREFERENCE",
                "user_action": "PAY_NOW",
                "return_url": self.return_url,
                "cancel_url": self.cancel_url,
            },
        }

        order = await self._post_with_token(
            f"{self.base_url}/v2/checkout/orders",
            payload=payload,
            failure_message="Failed to create PayPal order",
        )
        logger.info(f"PayPal order created: {order.get('id')}")
        return PayPalOrder(
            order_id=order.get("id"),
            status=order.get("status"),
            links=order.get("links") or [],
        )

    async def capture_order(self, order_id: str) -> PayPalCapture:
        """
        Capture an approved order.

        Args:
            order_id: PayPal order id (the `token` query parameter of the return url)

        Returns:
            PayPalCapture with the captured amount

        Raises:
            UpstreamError: PayPal answered with a non-2xx status
            PaymentNotCompletedError: the capture status is not COMPLETED
        """
        if not order_id:
            raise ValidationError("Order ID is required")

        capture = await self._post_with_token(
            f"{self.base_url}/v2/checkout/orders/{order_id}/capture",
            payload=None,
            failure_message="Failed to capture PayPal order",
        )

        status = capture.get("status")
        if status != COMPLETED:
            logger.warning(f"PayPal order {order_id} not completed, status: {status}")
            raise PaymentNotCompletedError("Payment not completed", status=status)

        amount, currency = _captured_amount(capture)
        payer_id = (capture.get("payer") or {}).get("payer_id")
        logger.info(f"Payment successful! Order: {capture.get('id')} Amount: {amount}")
        return PayPalCapture(
            order_id=capture.get("id") or order_id,
            status=status,
            amount=amount,
            currency=currency,
            payer_id=payer_id,
        )

    async def _post_with_token(
        self, endpoint: str, payload: Optional[dict], failure_message: str
    ) -> Dict[str, Any]:
        access_token = await self.get_access_token()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }

        try:
            async with self._client() as client:
                response = await client.post(endpoint, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Request to PayPal failed: {e}")
            raise UpstreamError(failure_message, details=str(e))
        except Exception as e:
            logger.error(f"Unexpected error calling PayPal: {repr(e)}")
            logger.debug(traceback.format_exc())
            raise

        data = _json_or_text(response)
        if response.is_error:
            logger.error(
                f"PayPal API returned error {response.status_code}: {data}"
            )
            logger.debug(f"Request URL: {endpoint}")
            raise UpstreamError(
                failure_message, details=data, upstream_status=response.status_code
            )
        if not isinstance(data, dict):
            raise UpstreamError(failure_message, details=data)
        return data


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _format_amount(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01'))}"


def _captured_amount(capture: Dict[str, Any]) -> tuple[Decimal, Optional[str]]:
    units = capture.get("purchase_units") or []
    unit = units[0] if units else {}
    amount = unit.get("amount")
    if not amount:
        captures = (unit.get("payments") or {}).get("captures") or []
        amount = captures[0].get("amount") if captures else None
    if not amount or amount.get("value") is None:
        raise UpstreamError("PayPal capture carried no amount", details=capture)
    return Decimal(str(amount["value"])), amount.get("currency_code")


def get_paypal_service() -> PayPalService:
    """Request-scoped adapter, override in tests through app.dependency_overrides."""
    return PayPalService(
        client_id=PAYPAL_CLIENT_ID,
        client_secret=PAYPAL_CLIENT_SECRET,
        base_url=PAYPAL_API_URL,
        return_url=f"{API_BASE_URL}/api/paypal/success",
        cancel_url=f"{API_BASE_URL}/api/paypal/cancel",
        currency=PAYPAL_CURRENCY,
        brand_name=PAYPAL_BRAND_NAME,
        timeout=PAYPAL_TIMEOUT_SECONDS,
    )
