class OrderError(Exception):
    """Base class for order placement failures that map to a client-facing message."""
    message = "Order could not be placed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ProductNotFoundError(OrderError):
    message = "Product not found"


class EmptyCartError(OrderError):
    message = "Cart is empty"


class InvalidAddressError(OrderError):
    message = "Invalid address"


class PaymentVerificationFailedError(OrderError):
    message = "Payment verification failed"


class InvalidAmountError(OrderError):
    message = "Invalid amount"
