"""Repository for the Cart aggregate."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart, CartItem
from storefront.domain import storefront


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        return results[0] if results else None

    def for_user_or_new(self, user_id) -> Cart:
        """Return the user's cart, creating an unsaved one if there is none yet."""
        return self.for_user(user_id) or Cart.create(user_id=str(user_id))

    def holding_item(self, item_id) -> Cart | None:
        """Find whichever cart contains the given line, if any."""
        lines = current_domain.repository_for(CartItem)._dao.query.filter(id=str(item_id)).limit(1).all().items
        if not lines:
            return None
        cart = self.get(lines[0].cart_id)
        return cart if cart.find_item(item_id) is not None else None
