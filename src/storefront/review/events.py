"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    """A customer reviewed a product for the first time."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    submitted_at = DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewRevised:
    """A customer resubmitted, replacing the rating and comment."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_rating = Integer()
    rating = Integer(required=True)
    comment = Text()
    revised_at = DateTime(required=True)
