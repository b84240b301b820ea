"""
Razorpay payment-gateway adapter.

Two operations are exposed to the order service:
  * create_order: remote call that opens a payment intent on the gateway.
  * verify_signature: local HMAC-SHA256 check of the checkout callback,
    computed over "<gateway_order_id>|<gateway_payment_id>" with the key secret.

Credentials are passed in at construction; nothing here reads the environment.
"""
import hashlib
import hmac
import uuid
from typing import Optional

import httpx
import structlog

from shared.config.settings import Settings, get_settings
from shared.observability import ecomm_gateway_orders_total

from .schemas import GatewayOrder

logger = structlog.get_logger(__name__)


class UpstreamGatewayError(Exception):
    """The payment gateway could not be reached or rejected the request."""


def new_receipt_id() -> str:
    # Razorpay caps receipts at 40 characters
    return f"receipt_{uuid.uuid4().hex}"


class RazorpayGateway:
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        currency: str = "INR",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        return cls(
            key_id=settings.razorpay_key_id,
            key_secret=settings.razorpay_key_secret,
            base_url=settings.razorpay_base_url,
            currency=settings.payment_currency,
            timeout=settings.gateway_timeout_seconds,
            transport=transport,
        )

    async def create_order(
        self, amount_minor: int, receipt: str, currency: Optional[str] = None
    ) -> GatewayOrder:
        if not self.key_id or not self.key_secret:
            ecomm_gateway_orders_total.labels(status="failed").inc()
            raise UpstreamGatewayError("Payment gateway credentials are not configured")

        payload = {"amount": amount_minor, "currency": currency or self.currency, "receipt": receipt}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post("/orders", json=payload)
                resp.raise_for_status()
                order = GatewayOrder.model_validate(resp.json())
        except httpx.HTTPStatusError as e:
            ecomm_gateway_orders_total.labels(status="failed").inc()
            logger.error("gateway_order_rejected", status_code=e.response.status_code, receipt=receipt)
            raise UpstreamGatewayError(f"Gateway rejected order creation ({e.response.status_code})") from e
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers undecodable JSON and pydantic validation errors
            ecomm_gateway_orders_total.labels(status="failed").inc()
            logger.error("gateway_order_failed", error=str(e), receipt=receipt)
            raise UpstreamGatewayError("Failed to create order with payment gateway") from e

        ecomm_gateway_orders_total.labels(status="success").inc()
        logger.info("gateway_order_created", gateway_order_id=order.id, amount=order.amount, currency=order.currency)
        return order

    def expected_signature(self, gateway_order_id: str, gateway_payment_id: str) -> str:
        message = f"{gateway_order_id}|{gateway_payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        """Constant-time, exact (case-sensitive) comparison against the hex digest."""
        if not signature or not self.key_secret:
            return False
        expected = self.expected_signature(gateway_order_id, gateway_payment_id)
        return hmac.compare_digest(expected.encode(), signature.encode())


def get_payment_gateway() -> RazorpayGateway:
    """FastAPI dependency; tests override it with a gateway on a mock transport."""
    return RazorpayGateway.from_settings(get_settings())
