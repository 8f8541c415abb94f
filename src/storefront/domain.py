"""Storefront domain — catalogue, carts, orders, reviews and identities.

Everything lives in a single domain so that one unit of work can span the
Order, Product and Cart aggregates touched by checkout.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
