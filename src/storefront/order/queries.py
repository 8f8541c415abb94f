"""Read access to orders, scoped by the caller's role."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront import config
from storefront.errors import Forbidden, InvalidRequest, NotFound
from storefront.identity.access import load_caller
from storefront.identity.user import User
from storefront.order.order import Order


@dataclass
class OrderView:
    order: Order
    owner: User | None = None
    address: object | None = None


def _owner_of(order, cache):
    key = str(order.user_id)
    if key not in cache:
        try:
            cache[key] = current_domain.repository_for(User).get(key)
        except ObjectNotFoundError:
            cache[key] = None
    return cache[key]


def list_orders(user_id) -> list[OrderView]:
    """Customers get their own orders; staff get every order with its owner."""
    caller = load_caller(user_id)
    orders = current_domain.repository_for(Order)

    if not caller.is_staff:
        return [OrderView(order=order, owner=caller) for order in orders.for_user(caller.id)]

    owners = {}
    return [OrderView(order=order, owner=_owner_of(order, owners)) for order in orders.everything()]


def get_order(user_id, order_id) -> OrderView:
    caller = load_caller(user_id)
    if not order_id:
        raise InvalidRequest("Order ID is required")

    try:
        order = current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise NotFound("Order not found") from None

    if not caller.is_staff and not order.is_owned_by(caller.id):
        if config.conceal_foreign_orders():
            raise NotFound("Order not found")
        raise Forbidden()

    owner = _owner_of(order, {})
    address = owner.find_address(order.address_id) if owner else None
    return OrderView(order=order, owner=owner, address=address)


def has_purchased(user_id, product_id) -> bool:
    """True once the caller has a DELIVERED order containing the product."""
    caller = load_caller(user_id)
    if not product_id:
        raise InvalidRequest("Product ID is required")
    return current_domain.repository_for(Order).has_delivered_product(caller.id, product_id)
