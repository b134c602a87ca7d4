# app/domain/errors.py
"""
Error taxonomy raised by services and translated to JSON responses
by the handlers registered in ``app.main``.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class InvalidQuantityError(ValidationError):
    default_message = "Quantity must be >= 1"


class InvalidStatusError(ValidationError):
    default_message = "Invalid order status"


class EmptyCartError(ValidationError):
    default_message = "Cart is empty"


class PaymentVerificationError(ValidationError):
    default_message = "Payment verification failed"


class AuthError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AuthError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InsufficientStockError(ConflictError):
    default_message = "Insufficient stock"

    def __init__(self, product_name: str, requested: int | None = None):
        self.product_name = product_name
        self.requested = requested
        super().__init__(f"Insufficient stock for {product_name}")


class InternalError(AppError):
    status_code = 500


class PaymentGatewayError(InternalError):
    status_code = 502
    default_message = "Payment gateway unavailable"
