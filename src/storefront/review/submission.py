"""SubmitReview — create or revise the caller's review of a product.

Checks run in a fixed order so callers get the most fundamental problem
first: role, product id, rating, product, then purchase history.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import Forbidden, InvalidRequest, NotFound
from storefront.identity.access import require_customer
from storefront.review.eligibility import can_review
from storefront.review.review import Review, validate_rating

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier()
    rating = Float()
    comment = Text()


@storefront.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        customer = require_customer(command.user_id, "Only customers can submit reviews")
        if not command.product_id:
            raise InvalidRequest("Product ID is required")
        rating = validate_rating(command.rating)

        try:
            current_domain.repository_for(Product).get(str(command.product_id))
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        if not can_review(customer.id, command.product_id):
            raise Forbidden("You must purchase and receive this product before leaving a review")

        repo = current_domain.repository_for(Review)
        review = repo.by_user_and_product(customer.id, command.product_id)
        created = review is None
        if created:
            review = Review.submit(
                user_id=customer.id,
                product_id=command.product_id,
                rating=rating,
                comment=command.comment,
            )
        else:
            review.revise(rating, command.comment)
        repo.add(review)

        logger.info(
            "Review submitted" if created else "Review revised",
            review_id=str(review.id),
            product_id=str(command.product_id),
            user_id=str(customer.id),
            rating=rating,
        )
        return {"review_id": str(review.id), "created": created}
