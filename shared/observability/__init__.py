from .setup import setup_observability
from .metrics import (
    ecomm_orders_placed_total,
    ecomm_checkout_duration_seconds,
    ecomm_payment_verification_total,
    ecomm_gateway_orders_total,
)
