"""Repository for the Product aggregate, with catalogue filtering."""

from storefront.catalogue.product import Product
from storefront.domain import storefront

# Upper bound for unpaginated catalogue listings
LISTING_LIMIT = 1000


@storefront.repository(part_of=Product)
class ProductRepository:
    def search(self, search=None, category=None, min_price=None, max_price=None) -> list[Product]:
        """Filter products by exact category, inclusive price range and name substring.

        Every filter is applied by the store before the listing limit, so older
        matches are never crowded out by newer products. Results come back
        newest first. There is no relevance ranking.
        """
        criteria = {}
        if search and search.strip():
            criteria["name__icontains"] = search.strip()
        if category:
            criteria["category"] = category
        if min_price is not None:
            criteria["price__gte"] = float(min_price)
        if max_price is not None:
            criteria["price__lte"] = float(max_price)

        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)
        return query.order_by("-created_at").limit(LISTING_LIMIT).all().items
