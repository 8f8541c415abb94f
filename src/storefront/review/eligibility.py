"""Verified-purchase rule for reviews."""

from protean.utils.globals import current_domain

from storefront.order.order import Order


def can_review(user_id, product_id) -> bool:
    """A user may review a product once an order of theirs containing it is DELIVERED."""
    return current_domain.repository_for(Order).has_delivered_product(user_id, product_id)
