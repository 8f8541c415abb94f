"""Integration tests for review endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import product_router, register_error_handlers, review_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(review_router)
    app.include_router(product_router)
    register_error_handlers(app)
    return TestClient(app)


def _as(user_id):
    return {"X-User-Id": user_id}


class TestSubmitReviewAPI:
    def test_first_submission_is_201(self, client, customer, product, delivered_order):
        response = client.post(
            "/reviews", json={"productId": product, "rating": 5, "comment": "Bright"}, headers=_as(customer)
        )
        assert response.status_code == 201
        assert response.json()["rating"] == 5
        assert response.json()["userName"] == "Carol"

    def test_resubmission_is_200(self, client, customer, product, delivered_order):
        first = client.post("/reviews", json={"productId": product, "rating": 2}, headers=_as(customer)).json()
        response = client.post("/reviews", json={"productId": product, "rating": 4}, headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["id"] == first["id"]
        assert response.json()["rating"] == 4

    def test_not_purchased(self, client, customer, product):
        response = client.post("/reviews", json={"productId": product, "rating": 5}, headers=_as(customer))
        assert response.status_code == 403

    def test_invalid_rating(self, client, customer, product, delivered_order):
        response = client.post("/reviews", json={"productId": product, "rating": 6}, headers=_as(customer))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RATING"

    def test_missing_rating(self, client, customer, product, delivered_order):
        response = client.post("/reviews", json={"productId": product}, headers=_as(customer))
        assert response.json()["code"] == "INVALID_RATING"

    def test_staff_forbidden(self, client, manager, product):
        response = client.post("/reviews", json={"productId": product, "rating": 5}, headers=_as(manager))
        assert response.status_code == 403

    def test_unknown_product(self, client, customer):
        response = client.post("/reviews", json={"productId": "missing", "rating": 5}, headers=_as(customer))
        assert response.status_code == 404

    def test_missing_product_id(self, client, customer):
        response = client.post("/reviews", json={"rating": 5}, headers=_as(customer))
        assert response.status_code == 400
        assert response.json() == {"error": "Product ID is required", "code": "VALIDATION"}


class TestListReviewsAPI:
    def test_requires_product_id(self, client):
        response = client.get("/reviews")
        assert response.status_code == 400
        assert response.json()["error"] == "Product ID is required"

    def test_lists_reviews_for_product(self, client, customer, product, delivered_order):
        client.post("/reviews", json={"productId": product, "rating": 4}, headers=_as(customer))
        reviews = client.get("/reviews", params={"productId": product}).json()
        assert [r["rating"] for r in reviews] == [4]

    def test_product_detail_embeds_reviews(self, client, customer, product, delivered_order):
        client.post("/reviews", json={"productId": product, "rating": 4}, headers=_as(customer))
        detail = client.get(f"/products/{product}").json()
        assert [r["rating"] for r in detail["reviews"]] == [4]
