"""Error taxonomy shared by the domain handlers and the HTTP layer.

Each error carries a category (AUTH, FORBIDDEN, NOT_FOUND, VALIDATION,
CONFLICT, INTERNAL), a specific machine-readable code and the HTTP status
the API answers with. Extra keyword arguments travel with the error and are
included in the response body (for example the offending ``productId``).
"""


class StorefrontError(Exception):
    category = "INTERNAL"
    code = "INTERNAL"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, *, code=None, **details):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.message, "code": self.code, **self.details}


class NotAuthenticated(StorefrontError):
    category = "AUTH"
    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(StorefrontError):
    category = "FORBIDDEN"
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Forbidden"


class AccountNotLinked(Forbidden):
    code = "ACCOUNT_NOT_LINKED"
    default_message = "This email is already linked to a different sign-in account"


class NotFound(StorefrontError):
    category = "NOT_FOUND"
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class InvalidRequest(StorefrontError):
    category = "VALIDATION"
    code = "VALIDATION"
    status_code = 400
    default_message = "Invalid request"


class EmptyCart(InvalidRequest):
    code = "EMPTY_CART"
    default_message = "Your cart is empty"


class InvalidAddress(InvalidRequest):
    code = "INVALID_ADDRESS"
    default_message = "Invalid shipping address"


class InvalidStatus(InvalidRequest):
    code = "INVALID_STATUS"
    default_message = "Invalid status value"


class InvalidTransition(InvalidRequest):
    code = "INVALID_TRANSITION"
    default_message = "Order cannot move to the requested status"


class InvalidRating(InvalidRequest):
    code = "INVALID_RATING"
    default_message = "Rating must be between 1 and 5"


class ProductInUse(InvalidRequest):
    code = "PRODUCT_IN_USE"
    default_message = "Cannot delete product with existing orders. Consider updating stock to 0 instead."


class Conflict(StorefrontError):
    category = "CONFLICT"
    code = "CONFLICT"
    status_code = 409
    default_message = "The resource was modified concurrently, please retry"


class InsufficientStock(Conflict):
    # Reported as 400 to match the storefront UI contract
    code = "INSUFFICIENT_STOCK"
    status_code = 400
    default_message = "Not enough stock available"
