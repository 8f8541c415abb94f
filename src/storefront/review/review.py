"""Review aggregate — one rating and comment per customer per product.

Only customers who have received the product may review it; that check
needs the customer's orders and lives in ``eligibility.py``. Submitting a
second time revises the existing review instead of creating another.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront
from storefront.errors import InvalidRating
from storefront.review.events import ReviewRevised, ReviewSubmitted

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    """Return the rating as an int, or raise INVALID_RATING."""
    if rating is None or isinstance(rating, bool):
        raise InvalidRating()
    try:
        value = int(rating)
    except (TypeError, ValueError, OverflowError):
        raise InvalidRating() from None
    if value != rating or not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRating()
    return value


@storefront.aggregate
class Review:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

    @classmethod
    def submit(cls, user_id, product_id, rating, comment=None):
        rating = validate_rating(rating)
        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            comment=comment,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                comment=comment,
                submitted_at=now,
            )
        )
        return review

    def revise(self, rating, comment=None):
        rating = validate_rating(rating)
        previous = self.rating
        now = datetime.now(UTC)

        self.rating = rating
        self.comment = comment
        self.updated_at = now

        self.raise_(
            ReviewRevised(
                review_id=str(self.id),
                product_id=str(self.product_id),
                user_id=str(self.user_id),
                previous_rating=previous,
                rating=rating,
                comment=comment,
                revised_at=now,
            )
        )
