"""Cart line management — commands and handler.

Every mutation is scoped to the caller's own cart. Editing or removing a
line that lives in somebody else's cart is refused with FORBIDDEN; a line id
that does not exist anywhere is NOT_FOUND.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import Forbidden, InsufficientStock, NotFound
from storefront.identity.access import load_caller


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


def _cart_owning(user_id, item_id) -> Cart:
    """Return the caller's cart if it holds ``item_id``."""
    repo = current_domain.repository_for(Cart)

    cart = repo.for_user(user_id)
    if cart is not None and cart.find_item(item_id) is not None:
        return cart

    if repo.holding_item(item_id) is not None:
        raise Forbidden("Cart item belongs to another user")
    raise NotFound("Cart item not found")


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        load_caller(command.user_id)
        try:
            current_domain.repository_for(Product).get(str(command.product_id))
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user_or_new(command.user_id)
        item = cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        load_caller(command.user_id)
        cart = _cart_owning(command.user_id, command.item_id)

        item = cart.find_item(command.item_id)
        try:
            product = current_domain.repository_for(Product).get(str(item.product_id))
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        if command.quantity is not None and not product.has_stock_for(command.quantity):
            raise InsufficientStock(productId=str(product.id))

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        load_caller(command.user_id)
        cart = _cart_owning(command.user_id, command.item_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)
