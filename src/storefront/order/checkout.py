"""Checkout — converts the caller's cart into an order in one unit of work.

The handler runs inside a single UnitOfWork: the new Order, every Product
stock decrement and the emptied Cart are committed together or not at all.
Stock is validated for every line before anything is changed, and each
Product is saved with an expected-version check, so two checkouts racing for
the last unit cannot both commit. The loser gets INSUFFICIENT_STOCK; there is
no automatic retry.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import EmptyCart, InsufficientStock, InvalidAddress
from storefront.identity.access import load_caller
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    address_id = Identifier()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = load_caller(command.user_id)

        carts = current_domain.repository_for(Cart)
        cart = carts.for_user(user.id)
        if cart is None or not cart.items:
            raise EmptyCart()

        if user.find_address(command.address_id) is None:
            raise InvalidAddress()

        products = current_domain.repository_for(Product)
        lines = [(item, self._product_for(products, item.product_id)) for item in cart.items]

        order = Order.place(
            user_id=user.id,
            address_id=command.address_id,
            lines=[
                {
                    "product_id": str(product.id),
                    "product_name": product.name,
                    "quantity": item.quantity,
                    "price": product.price,
                }
                for item, product in lines
            ],
        )

        # All-or-nothing: check every line before touching any stock
        for item, product in lines:
            if not product.has_stock_for(item.quantity):
                logger.info(
                    "Checkout rejected, insufficient stock",
                    user_id=str(user.id),
                    product_id=str(product.id),
                    requested=item.quantity,
                    available=product.stock,
                )
                raise InsufficientStock(
                    f"Not enough stock available for {product.name}",
                    productId=str(product.id),
                )

        for item, product in lines:
            product.reserve(item.quantity)
            products.add(product)

        cart.clear()
        carts.add(cart)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(user.id),
            item_count=len(order.items),
            total=order.total,
        )
        return str(order.id)

    @staticmethod
    def _product_for(products, product_id) -> Product:
        try:
            return products.get(str(product_id))
        except ObjectNotFoundError:
            raise InsufficientStock(
                "A product in your cart is no longer available",
                productId=str(product_id),
            ) from None


def place_order(user_id, address_id) -> str:
    """Run checkout and report a lost stock race as INSUFFICIENT_STOCK."""
    try:
        return current_domain.process(
            PlaceOrder(user_id=user_id, address_id=address_id),
            asynchronous=False,
        )
    except ExpectedVersionError:
        logger.warning("Checkout lost a concurrent stock update", user_id=str(user_id))
        raise InsufficientStock("Stock changed while your order was being placed, please try again") from None
