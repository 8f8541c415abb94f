"""FastAPI endpoints for the storefront."""

from fastapi import APIRouter, Depends, Query, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_user_id, identity_provider
from storefront.api.representations import (
    address_response,
    cart_response,
    order_response,
    product_detail_response,
    product_response,
    review_response,
    user_response,
)
from storefront.api.schemas import (
    AddressRequest,
    AddressResponse,
    AddToCartRequest,
    CartResponse,
    CheckoutRequest,
    IdentityRequest,
    IdentityResponse,
    OrderResponse,
    ProductDetailResponse,
    ProductIdResponse,
    ProductRequest,
    ProductResponse,
    PurchaseCheckResponse,
    QuantityRequest,
    ReviewRequest,
    ReviewResponse,
    RoleRequest,
    StatusRequest,
    StatusResponse,
    UserResponse,
)
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.queries import cart_for
from storefront.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.product import CATEGORY_VALUES, Product
from storefront.errors import InvalidRequest, NotFound
from storefront.identity.access import load_caller
from storefront.identity.addresses import AddAddress, RemoveAddress, SetDefaultAddress
from storefront.identity.authentication import UpsertIdentity
from storefront.identity.roles import AssignRole
from storefront.identity.user import User
from storefront.order.checkout import place_order
from storefront.order.queries import get_order, has_purchased, list_orders
from storefront.order.status import ChangeOrderStatus
from storefront.review.review import Review
from storefront.review.submission import SubmitReview

identity_router = APIRouter(tags=["identity"])
product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _reviews_with_authors(product_id):
    users = current_domain.repository_for(User)
    authors = {}
    result = []
    for review in current_domain.repository_for(Review).for_product(product_id):
        key = str(review.user_id)
        if key not in authors:
            try:
                authors[key] = users.get(key)
            except ObjectNotFoundError:
                authors[key] = None
        result.append((review, authors[key]))
    return result


# --- Identity endpoints ---


@identity_router.post(
    "/auth/identity", response_model=IdentityResponse, dependencies=[Depends(identity_provider)]
)
async def upsert_identity(body: IdentityRequest) -> IdentityResponse:
    command = UpsertIdentity(
        email=body.email,
        name=body.name,
        image=body.image,
        provider=body.provider,
        provider_account_id=body.provider_account_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdentityResponse(**result)


@identity_router.get("/me", response_model=UserResponse)
async def me(user_id: str = Depends(current_user_id)) -> UserResponse:
    return user_response(load_caller(user_id))


@identity_router.patch("/users/{target_id}/role", response_model=IdentityResponse)
async def assign_role(
    target_id: str, body: RoleRequest, user_id: str = Depends(current_user_id)
) -> IdentityResponse:
    command = AssignRole(actor_id=user_id, user_id=target_id, role=body.role)
    result = current_domain.process(command, asynchronous=False)
    return IdentityResponse(**result)


@identity_router.get("/addresses", response_model=list[AddressResponse])
async def list_addresses(user_id: str = Depends(current_user_id)) -> list[AddressResponse]:
    return [address_response(a) for a in load_caller(user_id).addresses]


@identity_router.post("/addresses", status_code=201, response_model=AddressResponse)
async def add_address(body: AddressRequest, user_id: str = Depends(current_user_id)) -> AddressResponse:
    command = AddAddress(
        user_id=user_id,
        street=body.street,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
        is_default=body.is_default,
    )
    address_id = current_domain.process(command, asynchronous=False)
    return address_response(load_caller(user_id).find_address(address_id))


@identity_router.delete("/addresses/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()


@identity_router.patch("/addresses/{address_id}/default", response_model=AddressResponse)
async def set_default_address(address_id: str, user_id: str = Depends(current_user_id)) -> AddressResponse:
    current_domain.process(SetDefaultAddress(user_id=user_id, address_id=address_id), asynchronous=False)
    return address_response(load_caller(user_id).find_address(address_id))


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    search: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
) -> list[ProductResponse]:
    if category and category not in CATEGORY_VALUES:
        raise InvalidRequest("Invalid category")

    products = current_domain.repository_for(Product).search(
        search=search, category=category, min_price=min_price, max_price=max_price
    )
    return [product_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str) -> ProductDetailResponse:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product not found") from None
    return product_detail_response(product, _reviews_with_authors(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: ProductRequest, user_id: str = Depends(current_user_id)) -> ProductIdResponse:
    command = CreateProduct(
        actor_id=user_id,
        name=body.name,
        description=body.description,
        image=body.image,
        price=body.price,
        stock=body.stock,
        category=body.category,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: ProductRequest, user_id: str = Depends(current_user_id)
) -> ProductResponse:
    command = UpdateProduct(
        actor_id=user_id,
        product_id=product_id,
        name=body.name,
        description=body.description,
        image=body.image,
        price=body.price,
        stock=body.stock,
        category=body.category,
    )
    current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(DeleteProduct(actor_id=user_id, product_id=product_id), asynchronous=False)
    return StatusResponse(status="deleted")


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    return cart_response(*cart_for(user_id))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    command = AddToCart(user_id=user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return cart_response(*cart_for(user_id))


@cart_router.patch("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, body: QuantityRequest, user_id: str = Depends(current_user_id)
) -> CartResponse:
    command = UpdateCartQuantity(user_id=user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return cart_response(*cart_for(user_id))


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, user_id: str = Depends(current_user_id)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=user_id, item_id=item_id), asynchronous=False)
    return cart_response(*cart_for(user_id))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest, user_id: str = Depends(current_user_id)) -> OrderResponse:
    order_id = place_order(user_id=user_id, address_id=body.address_id)
    return order_response(get_order(user_id, order_id))


@order_router.get("", response_model=list[OrderResponse])
async def orders(user_id: str = Depends(current_user_id)) -> list[OrderResponse]:
    return [order_response(view) for view in list_orders(user_id)]


@order_router.get("/check-purchase", response_model=PurchaseCheckResponse)
async def check_purchase(
    product_id: str | None = Query(None, alias="productId"),
    user_id: str = Depends(current_user_id),
) -> PurchaseCheckResponse:
    return PurchaseCheckResponse(has_purchased=has_purchased(user_id, product_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return order_response(get_order(user_id, order_id))


@order_router.patch("/{order_id}", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: StatusRequest, user_id: str = Depends(current_user_id)
) -> OrderResponse:
    command = ChangeOrderStatus(actor_id=user_id, order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return order_response(get_order(user_id, order_id))


# --- Review endpoints ---


@review_router.post("", status_code=201, response_model=ReviewResponse)
async def submit_review(
    body: ReviewRequest, response: Response, user_id: str = Depends(current_user_id)
) -> ReviewResponse:
    command = SubmitReview(
        user_id=user_id,
        product_id=body.product_id,
        rating=body.rating,
        comment=body.comment,
    )
    result = current_domain.process(command, asynchronous=False)
    if not result["created"]:
        response.status_code = 200

    review = current_domain.repository_for(Review).get(result["review_id"])
    return review_response(review, load_caller(user_id))


@review_router.get("", response_model=list[ReviewResponse])
async def list_reviews(product_id: str | None = Query(None, alias="productId")) -> list[ReviewResponse]:
    if not product_id:
        raise InvalidRequest("Product ID is required")
    return [review_response(review, author) for review, author in _reviews_with_authors(product_id)]
