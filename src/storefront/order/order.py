"""Order aggregate — an immutable record of what was bought, at what price.

An order is only ever created by checkout (see ``checkout.py``). Its items
carry the unit price in force at that moment and the total is computed once,
with fixed-point arithmetic, and never recomputed. After creation the only
thing that changes is the status.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    CANCELLED from PENDING, PROCESSING or SHIPPED
    DELIVERED and CANCELLED are terminal

The adjacency rules above are only enforced in strict mode. By default any
recognized status can be set from any other, which is how the storefront has
always behaved; see ``storefront.config.strict_order_transitions``.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.errors import EmptyCart, InvalidStatus, InvalidTransition
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.shared.money import as_float, sum_lines, to_money


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(s for s, targets in _VALID_TRANSITIONS.items() if not targets)


def parse_status(value) -> OrderStatus:
    """Map a wire value onto the closed status enum, or raise INVALID_STATUS."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus() from None


@storefront.entity(part_of="Order")
class OrderItem:
    """One purchased line. ``price`` is the unit price captured at checkout."""

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total = Float(required=True, min_value=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, address_id, lines):
        """Create a PENDING order from priced lines.

        Args:
            user_id: The customer placing the order.
            address_id: One of the customer's addresses (referenced, not copied).
            lines: List of dicts with product_id, product_name, quantity and
                   price (the current unit price, which becomes the snapshot).
        """
        if not lines:
            raise EmptyCart()

        total = sum_lines((line["price"], line["quantity"]) for line in lines)
        now = datetime.now(UTC)

        order = cls(
            user_id=user_id,
            address_id=address_id,
            status=OrderStatus.PENDING.value,
            total=as_float(total),
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    product_name=line.get("product_name"),
                    quantity=line["quantity"],
                    price=as_float(to_money(line["price"])),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                address_id=str(address_id),
                items=json.dumps(
                    [
                        {"product_id": str(i.product_id), "quantity": i.quantity, "price": i.price}
                        for i in order.items
                    ]
                ),
                item_count=len(order.items),
                total=order.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def contains_product(self, product_id) -> bool:
        return any(str(item.product_id) == str(product_id) for item in self.items)

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _VALID_TRANSITIONS.get(self.current_status, set())

    def change_status(self, target, changed_by=None, strict=False):
        """Move the order to ``target`` and return the previous status.

        ``target`` may be an ``OrderStatus`` or its wire value. Setting the
        current status again is accepted and only bumps ``updated_at``.
        """
        target = target if isinstance(target, OrderStatus) else parse_status(target)
        previous = self.current_status

        if strict and target != previous and not self.can_transition_to(target):
            raise InvalidTransition(f"Cannot transition from {previous.value} to {target.value}")

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous.value,
                new_status=target.value,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )
        return previous
