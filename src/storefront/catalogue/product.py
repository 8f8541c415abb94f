"""Product aggregate root — price, stock and category.

Stock is the only inventory figure in the system. It is decremented by
checkout and restored by cancellation, always through ``reserve`` and
``release`` so the non-negative rule is checked before the field changes.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from storefront.catalogue.events import (
    ProductAdded,
    ProductDetailsUpdated,
    StockReleased,
    StockReserved,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStock
from storefront.shared.money import as_float, to_money


class Category(Enum):
    ELECTRONICS = "ELECTRONICS"
    CLOTHING = "CLOTHING"
    FOOD = "FOOD"
    BOOKS = "BOOKS"
    OTHER = "OTHER"


CATEGORY_VALUES = frozenset(c.value for c in Category)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text(required=True)
    image: String(max_length=500)
    price: Float(required=True, min_value=0.0)
    stock: Integer(required=True, min_value=0)
    category: String(required=True, choices=Category)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Product name cannot be empty"]})

    @classmethod
    def add(cls, name, description, price, stock, category, image=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            image=image,
            price=as_float(to_money(price)),
            stock=stock,
            category=category,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                stock=product.stock,
                category=product.category,
            )
        )
        return product

    def update_details(self, name, description, price, stock, category, image=None):
        """Replace the editable fields wholesale, as the edit form does."""
        previous_price = self.price

        self.name = name
        self.description = description
        self.image = image
        self.price = as_float(to_money(price))
        self.stock = stock
        self.category = category
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                previous_price=previous_price,
                stock=self.stock,
            )
        )

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def has_stock_for(self, quantity) -> bool:
        return quantity <= self.stock

    def reserve(self, quantity):
        """Take ``quantity`` units out of stock for an order."""
        if not self.has_stock_for(quantity):
            raise InsufficientStock(
                f"Not enough stock available for {self.name}",
                productId=str(self.id),
            )

        self.stock -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(StockReserved(product_id=str(self.id), quantity=quantity, remaining=self.stock))

    def release(self, quantity):
        """Put ``quantity`` units back, e.g. when an order is cancelled."""
        self.stock += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(StockReleased(product_id=str(self.id), quantity=quantity, remaining=self.stock))
