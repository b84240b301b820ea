from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from shared.config.settings import get_settings
from .jwt_handler import verify_access_token

def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Signed-in shoppers are limited per user id taken from the bearer token;
    anonymous callers (e.g. the public payment-intent endpoint) per client IP.
    """
    auth_header = request.headers.get("Authorization")

    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        payload = verify_access_token(token)
        if payload and "sub" in payload:
            return f"user:{payload['sub']}"

    # Handles proxies if X-Forwarded-For is set correctly by Uvicorn
    return f"ip:{get_remote_address(request)}"


def create_order_limit() -> str:
    """Limit string for the unauthenticated gateway-order endpoint, e.g. '10/minute'."""
    return get_settings().create_order_rate_limit


limiter = Limiter(key_func=user_id_or_ip)
