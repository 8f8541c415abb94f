"""Catalogue management — staff-only product commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import InvalidRequest, NotFound, ProductInUse
from storefront.identity.access import require_staff
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    actor_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    image: String(max_length=500)
    price: Float()
    stock: Integer()
    category: String(max_length=20)


@storefront.command(part_of="Product")
class UpdateProduct:
    actor_id: Identifier(required=True)
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    image: String(max_length=500)
    price: Float()
    stock: Integer()
    category: String(max_length=20)


@storefront.command(part_of="Product")
class DeleteProduct:
    actor_id: Identifier(required=True)
    product_id: Identifier(required=True)


def _get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise NotFound("Product not found") from None


_REQUIRED_DETAILS = ("name", "description", "price", "stock", "category")


def _require_details(command):
    if any(getattr(command, field) in (None, "") for field in _REQUIRED_DETAILS):
        raise InvalidRequest("Missing required fields")


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        require_staff(command.actor_id)
        _require_details(command)

        product = Product.add(
            name=command.name,
            description=command.description,
            image=command.image,
            price=command.price,
            stock=command.stock,
            category=command.category,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), actor_id=str(command.actor_id))
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        require_staff(command.actor_id)
        _require_details(command)

        product = _get_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            image=command.image,
            price=command.price,
            stock=command.stock,
            category=command.category,
        )
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        require_staff(command.actor_id)

        product = _get_product(command.product_id)
        if current_domain.repository_for(Order).references_product(product.id):
            raise ProductInUse()

        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("Product deleted", product_id=str(product.id), actor_id=str(command.actor_id))
