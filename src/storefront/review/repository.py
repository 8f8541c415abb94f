"""Repository for the Review aggregate."""

from storefront.domain import storefront
from storefront.review.review import Review

_LISTING_LIMIT = 1000


@storefront.repository(part_of=Review)
class ReviewRepository:
    def for_product(self, product_id) -> list[Review]:
        """Reviews of a product, newest first."""
        return (
            self._dao.query.filter(product_id=str(product_id))
            .order_by("-created_at")
            .limit(_LISTING_LIMIT)
            .all()
            .items
        )

    def by_user_and_product(self, user_id, product_id) -> Review | None:
        found = self._dao.query.filter(user_id=str(user_id), product_id=str(product_id)).limit(1).all().items
        return found[0] if found else None
