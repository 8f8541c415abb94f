"""Order status transitions — staff only.

Stock was committed when the order was placed. Cancelling an order gives
the quantities back; taking an order out of CANCELLED (possible only when
transitions are not strict) takes them again and fails if they are gone.
Both behaviours can be switched off with ``STOREFRONT_RESTOCK_ON_CANCEL``.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront import config
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.identity.access import require_staff
from storefront.order.order import Order, OrderStatus, parse_status

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(max_length=20)


@storefront.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        actor = require_staff(command.actor_id)
        target = parse_status(command.status)

        orders = current_domain.repository_for(Order)
        try:
            order = orders.get(str(command.order_id))
        except ObjectNotFoundError:
            raise NotFound("Order not found") from None

        previous = order.change_status(target, changed_by=actor.id, strict=config.strict_order_transitions())

        if config.restock_on_cancel() and previous != target:
            if target == OrderStatus.CANCELLED:
                self._adjust_stock(order, release=True)
            elif previous == OrderStatus.CANCELLED:
                self._adjust_stock(order, release=False)

        orders.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous.value,
            new_status=target.value,
            actor_id=str(actor.id),
        )
        return order.status

    @staticmethod
    def _adjust_stock(order, release):
        products = current_domain.repository_for(Product)
        for item in order.items:
            product = products.get(str(item.product_id))
            if release:
                product.release(item.quantity)
            else:
                product.reserve(item.quantity)
            products.add(product)
