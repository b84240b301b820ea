from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_orders_placed_total = Counter(
    "ecomm_orders_placed_total",
    "Total orders persisted",
    ["payment_method"]  # Labels: 'COD', 'ONLINE'
)

ecomm_checkout_duration_seconds = Histogram(
    "ecomm_checkout_duration_seconds",
    "Duration of order placement flows in seconds",
    ["flow"]  # Labels: 'direct_buy', 'cod', 'online'
)

ecomm_payment_verification_total = Counter(
    "ecomm_payment_verification_total",
    "Gateway payment signature verifications",
    ["status"]  # Labels: 'success', 'failed'
)

ecomm_gateway_orders_total = Counter(
    "ecomm_gateway_orders_total",
    "Payment intents requested from the gateway",
    ["status"]  # Labels: 'success', 'failed'
)
