"""Pydantic request/response schemas for the Storefront API.

The wire format is camelCase. Models accept either spelling on input and
always emit camelCase.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Identity ---


class IdentityRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "email": "jane@example.com",
                    "name": "Jane Doe",
                    "image": "https://cdn.example.com/jane.png",
                    "provider": "google",
                    "providerAccountId": "1098431",
                }
            ]
        },
    )

    email: str = Field(..., max_length=254)
    name: str | None = Field(None, max_length=255)
    image: str | None = Field(None, max_length=500)
    provider: str | None = Field(None, max_length=50)
    provider_account_id: str | None = Field(None, max_length=255)


class IdentityResponse(CamelModel):
    user_id: str
    role: str


class RoleRequest(CamelModel):
    role: str


class UserSummary(CamelModel):
    id: str
    name: str | None = None
    email: str
    role: str


class UserResponse(UserSummary):
    image: str | None = None
    created_at: datetime | None = None


class AddressRequest(CamelModel):
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)
    is_default: bool = False


class AddressResponse(CamelModel):
    id: str
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str
    is_default: bool = False


# --- Catalogue ---


class ProductRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Noise Cancelling Headphones",
                    "description": "Over-ear, 30h battery.",
                    "image": "https://cdn.example.com/headphones.jpg",
                    "price": 199.99,
                    "stock": 25,
                    "category": "ELECTRONICS",
                }
            ]
        },
    )

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    image: str | None = Field(None, max_length=500)
    price: float | None = None
    stock: int | None = None
    category: str | None = None


class ReviewResponse(CamelModel):
    id: str
    user_id: str
    product_id: str
    rating: int
    comment: str | None = None
    user_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    image: str | None = None
    price: float
    stock: int
    category: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductDetailResponse(ProductResponse):
    reviews: list[ReviewResponse] = []


class ProductIdResponse(CamelModel):
    product_id: str


# --- Cart ---


class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1


class QuantityRequest(CamelModel):
    quantity: int


class CartLineResponse(CamelModel):
    id: str
    product_id: str
    quantity: int
    product: ProductResponse | None = None
    line_total: float | None = None


class CartResponse(CamelModel):
    id: str
    user_id: str
    items: list[CartLineResponse] = []
    subtotal: float = 0.0


# --- Orders ---


class CheckoutRequest(CamelModel):
    address_id: str | None = None


class StatusRequest(CamelModel):
    status: str | None = None


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    price: float


class OrderResponse(CamelModel):
    id: str
    user_id: str
    address_id: str
    status: str
    total: float
    items: list[OrderItemResponse] = []
    user: UserSummary | None = None
    address: AddressResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PurchaseCheckResponse(CamelModel):
    has_purchased: bool


# --- Reviews ---


class ReviewRequest(CamelModel):
    product_id: str | None = None
    rating: float | None = None
    comment: str | None = None


# --- Generic ---


class StatusResponse(CamelModel):
    status: str = "ok"
