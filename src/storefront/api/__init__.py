"""Storefront HTTP API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    cart_router,
    identity_router,
    order_router,
    product_router,
    review_router,
)

__all__ = [
    "cart_router",
    "identity_router",
    "order_router",
    "product_router",
    "review_router",
    "register_error_handlers",
]
