"""Builders that turn aggregates into response schemas."""

from storefront.api.schemas import (
    AddressResponse,
    CartLineResponse,
    CartResponse,
    OrderItemResponse,
    OrderResponse,
    ProductDetailResponse,
    ProductResponse,
    ReviewResponse,
    UserResponse,
    UserSummary,
)
from storefront.cart.queries import subtotal
from storefront.shared.money import as_float, line_total


def user_summary(user) -> UserSummary:
    return UserSummary(id=str(user.id), name=user.name, email=user.email, role=user.role)


def user_response(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        image=user.image,
        created_at=user.created_at,
    )


def address_response(address) -> AddressResponse:
    return AddressResponse(
        id=str(address.id),
        street=address.street,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country=address.country,
        is_default=bool(address.is_default),
    )


def product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        image=product.image,
        price=product.price,
        stock=product.stock,
        category=product.category,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def review_response(review, author=None) -> ReviewResponse:
    return ReviewResponse(
        id=str(review.id),
        user_id=str(review.user_id),
        product_id=str(review.product_id),
        rating=review.rating,
        comment=review.comment,
        user_name=author.name if author else None,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def product_detail_response(product, reviews) -> ProductDetailResponse:
    """``reviews`` is a list of ``(review, author)`` pairs."""
    return ProductDetailResponse(
        **product_response(product).model_dump(),
        reviews=[review_response(review, author) for review, author in reviews],
    )


def cart_response(cart, products) -> CartResponse:
    lines = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        lines.append(
            CartLineResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                product=product_response(product) if product else None,
                line_total=as_float(line_total(product.price, item.quantity)) if product else None,
            )
        )
    return CartResponse(
        id=str(cart.id),
        user_id=str(cart.user_id),
        items=lines,
        subtotal=as_float(subtotal(cart, products)),
    )


def order_response(view) -> OrderResponse:
    order = view.order
    return OrderResponse(
        id=str(order.id),
        user_id=str(order.user_id),
        address_id=str(order.address_id),
        status=order.status,
        total=order.total,
        items=[
            OrderItemResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
            )
            for item in order.items
        ],
        user=user_summary(view.owner) if view.owner else None,
        address=address_response(view.address) if view.address else None,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
