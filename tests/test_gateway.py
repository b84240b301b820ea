import base64
import hashlib
import hmac

import httpx
import pytest

from services.payment_service.gateway import RazorpayGateway, UpstreamGatewayError, new_receipt_id

from conftest import GATEWAY_SECRET


def _sign(order_id: str, payment_id: str, secret: str = GATEWAY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def _mutations(signature: str):
    """Every single-character substitution of a hex signature."""
    for i, ch in enumerate(signature):
        replacement = "0" if ch != "0" else "1"
        yield signature[:i] + replacement + signature[i + 1:]


def test_signature_matches_hmac_of_order_and_payment_ids(gateway):
    signature = _sign("order_abc", "pay_xyz")

    assert gateway.expected_signature("order_abc", "pay_xyz") == signature
    assert gateway.verify_signature("order_abc", "pay_xyz", signature)


def test_any_single_character_mutation_is_rejected(gateway):
    signature = _sign("order_abc", "pay_xyz")

    for mutated in _mutations(signature):
        assert not gateway.verify_signature("order_abc", "pay_xyz", mutated)


@pytest.mark.parametrize(
    "signature",
    [
        "",
        _sign("order_abc", "pay_xyz").upper(),
        _sign("order_abc", "pay_xyz") + "0",
        _sign("order_abc", "pay_xyz")[:-1],
        _sign("order_abc", "pay_xyz", secret="someone-else"),
        _sign("pay_xyz", "order_abc"),
    ],
)
def test_near_miss_signatures_are_rejected(gateway, signature):
    assert not gateway.verify_signature("order_abc", "pay_xyz", signature)


def test_no_secret_never_verifies():
    gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="")
    signature = hmac.new(b"", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()

    assert not gateway.verify_signature("order_abc", "pay_xyz", signature)


async def test_create_order_posts_minor_units_with_basic_auth(gateway, razorpay):
    order = await gateway.create_order(50000, receipt="receipt_1")

    request = razorpay.requests[-1]
    assert request.method == "POST"
    assert request.url == "https://api.razorpay.test/v1/orders"
    expected_auth = base64.b64encode(b"rzp_test_key:" + GATEWAY_SECRET.encode()).decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"
    assert razorpay.last_body == {"amount": 50000, "currency": "INR", "receipt": "receipt_1"}
    assert order.id == "order_0001"
    assert order.amount == 50000
    assert order.currency == "INR"


async def test_gateway_rejection_raises_upstream_error(gateway, razorpay):
    razorpay.status_code = 400

    with pytest.raises(UpstreamGatewayError):
        await gateway.create_order(100, receipt="receipt_1")


async def test_transport_failure_raises_upstream_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    gateway = RazorpayGateway(
        key_id="rzp_test_key",
        key_secret=GATEWAY_SECRET,
        transport=httpx.MockTransport(unreachable),
    )

    with pytest.raises(UpstreamGatewayError):
        await gateway.create_order(100, receipt="receipt_1")


async def test_missing_credentials_fail_before_any_request(razorpay):
    gateway = RazorpayGateway(key_id="", key_secret="", transport=httpx.MockTransport(razorpay))

    with pytest.raises(UpstreamGatewayError):
        await gateway.create_order(100, receipt="receipt_1")
    assert razorpay.requests == []


def test_receipt_ids_are_unique_and_fit_razorpay_limit():
    receipts = {new_receipt_id() for _ in range(50)}

    assert len(receipts) == 50
    assert all(len(r) <= 40 for r in receipts)
