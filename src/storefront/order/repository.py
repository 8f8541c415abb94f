"""Repository for the Order aggregate."""

from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderItem, OrderStatus


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id) -> list[Order]:
        """A customer's orders, newest first."""
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items

    def everything(self) -> list[Order]:
        """All orders, newest first. Staff view."""
        return self._dao.query.order_by("-created_at").limit(None).all().items

    def delivered_to(self, user_id) -> list[Order]:
        return (
            self._dao.query.filter(user_id=str(user_id), status=OrderStatus.DELIVERED.value)
            .limit(None)
            .all()
            .items
        )

    def has_delivered_product(self, user_id, product_id) -> bool:
        return any(order.contains_product(product_id) for order in self.delivered_to(user_id))

    def references_product(self, product_id) -> bool:
        """True when any order line, however old, points at the product."""
        lines = current_domain.repository_for(OrderItem)._dao.query.filter(product_id=str(product_id))
        return bool(lines.limit(1).all().items)
