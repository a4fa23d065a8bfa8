class OrderError(Exception):
    """Base exception for checkout and order lifecycle errors"""
    pass


class ValidationError(OrderError):
    """Raised when the checkout payload is malformed"""

    def __init__(self, message, errors=None):
        self.errors = errors or {}
        super().__init__(message)


class NotFoundError(OrderError):
    """Raised when a referenced product or order does not exist"""
    pass


class InsufficientStockError(OrderError):
    """Raised when a cart line asks for more units than are in stock"""

    def __init__(self, product_name: str, requested: int, available: int):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}: requested {requested}, available {available}"
        )


class InvalidTransitionError(OrderError):
    """Raised when an order status change would move backwards"""
    pass
