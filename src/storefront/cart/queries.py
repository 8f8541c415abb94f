"""Read side of the cart: the caller's lines with current product details."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.identity.access import load_caller
from storefront.shared.money import ZERO, line_total


def cart_for(user_id):
    """Return ``(cart, products)`` for the caller, creating the cart on first use.

    ``products`` maps product id to the current Product; lines whose product
    has since been deleted are simply absent from the mapping.
    """
    caller = load_caller(user_id)
    repo = current_domain.repository_for(Cart)

    cart = repo.for_user(caller.id)
    if cart is None:
        cart = Cart.create(user_id=str(caller.id))
        repo.add(cart)

    products = {}
    product_repo = current_domain.repository_for(Product)
    for item in cart.items:
        try:
            products[str(item.product_id)] = product_repo.get(str(item.product_id))
        except ObjectNotFoundError:
            continue
    return cart, products


def subtotal(cart, products):
    """Current value of the cart at today's prices."""
    total = ZERO
    for item in cart.items:
        product = products.get(str(item.product_id))
        if product is not None:
            total += line_total(product.price, item.quantity)
    return total
