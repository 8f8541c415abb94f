"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    stock: Integer(required=True)
    category: String(required=True, max_length=20)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    previous_price: Float(required=True)
    stock: Integer(required=True)


@storefront.event(part_of="Product")
class StockReserved:
    """Stock was committed to an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """Stock came back from a cancelled order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
