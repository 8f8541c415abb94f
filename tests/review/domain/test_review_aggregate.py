"""Tests for the Review aggregate."""

import pytest
from storefront.errors import InvalidRating
from storefront.review.events import ReviewRevised, ReviewSubmitted
from storefront.review.review import Review, validate_rating


class TestRatingValidation:
    @pytest.mark.parametrize("rating", [1, 3, 5, 4.0])
    def test_accepted(self, rating):
        assert validate_rating(rating) == int(rating)

    @pytest.mark.parametrize("rating", [0, 6, -1, 2.5, None, "five", True])
    def test_rejected(self, rating):
        with pytest.raises(InvalidRating):
            validate_rating(rating)


class TestSubmission:
    def test_submit_sets_fields(self):
        review = Review.submit(user_id="user-1", product_id="prod-1", rating=4, comment="Bright")
        assert review.rating == 4
        assert review.comment == "Bright"
        assert review.created_at is not None

    def test_comment_is_optional(self):
        review = Review.submit(user_id="user-1", product_id="prod-1", rating=5)
        assert review.comment is None

    def test_submit_raises_event(self):
        review = Review.submit(user_id="user-1", product_id="prod-1", rating=4)
        assert any(isinstance(e, ReviewSubmitted) for e in review._events)

    def test_submit_rejects_bad_rating(self):
        with pytest.raises(InvalidRating):
            Review.submit(user_id="user-1", product_id="prod-1", rating=7)


class TestRevision:
    def test_revise_replaces_rating_and_comment(self):
        review = Review.submit(user_id="user-1", product_id="prod-1", rating=2, comment="Meh")
        review.revise(5, "Grew on me")
        assert review.rating == 5
        assert review.comment == "Grew on me"

    def test_revise_raises_event_with_previous_rating(self):
        review = Review.submit(user_id="user-1", product_id="prod-1", rating=2)
        review.revise(4)
        event = next(e for e in review._events if isinstance(e, ReviewRevised))
        assert event.previous_rating == 2
        assert event.rating == 4
