"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``app.main`` turns them into the
``{"success": false, "error": <kind>, "message": <text>}`` envelope.
"""

from typing import Optional


class AppError(Exception):
    kind = "app_error"
    status_code = 500
    default_message = "Something went wrong"
    headers: Optional[dict] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class EmptyCartError(ValidationError):
    kind = "empty_cart"
    default_message = "Cart is empty"


class NotFoundError(AppError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class AuthenticationError(AppError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    kind = "forbidden"
    status_code = 403
    default_message = "Not authorized"


class StockUpdateFailedError(AppError):
    kind = "stock_update_failed"
    status_code = 409
    default_message = "Stock update failed. Order cancelled."


class InternalError(AppError):
    kind = "internal_error"
    status_code = 500
    default_message = "Internal server error"
