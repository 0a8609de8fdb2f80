"""Product management: commands and handler for catalogue maintenance."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from brewery.catalogue.product import Product
from brewery.domain import brewery

logger = structlog.get_logger(__name__)


@brewery.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=25)
    price = Float(required=True)
    description = String(max_length=100)
    stock = Integer(default=0, min_value=0)
    category = String(max_length=20)
    product_type = String(max_length=1)
    image_url = String(max_length=255)


@brewery.command(part_of="Product")
class UpdateProduct:
    """Replace every editable attribute of a product."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=25)
    price = Float(required=True)
    description = String(max_length=100)
    stock = Integer(required=True, min_value=0)
    active = Boolean(default=True)
    category = String(max_length=20)
    product_type = String(max_length=1)
    image_url = String(max_length=255)


@brewery.command(part_of="Product")
class UpdateProductPartial:
    """Change only the attributes that are supplied."""

    product_id = Identifier(required=True)
    name = String(max_length=25)
    price = Float()
    description = String(max_length=100)
    stock = Integer(min_value=0)
    active = Boolean()
    category = String(max_length=20)
    product_type = String(max_length=1)
    image_url = String(max_length=255)


@brewery.command(part_of="Product")
class UpdateProductDescription:
    product_id = Identifier(required=True)
    description = String(required=True, max_length=100)


@brewery.command(part_of="Product")
class DeleteProduct:
    """Soft delete: the product is deactivated, never removed."""

    product_id = Identifier(required=True)


@brewery.command(part_of="Product")
class ToggleProductStatus:
    product_id = Identifier(required=True)


@brewery.command(part_of="Product")
class UpdateProductsStatus:
    product_ids = Text(required=True)  # JSON array of product ids
    active = Boolean(required=True)


@brewery.command(part_of="Product")
class PutProductOnSale:
    product_id = Identifier(required=True)
    sale_price = Float(required=True)
    sale_start = DateTime(required=True)
    sale_end = DateTime(required=True)


@brewery.command(part_of="Product")
class EndProductSale:
    product_id = Identifier(required=True)


@brewery.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            stock=command.stock,
            category=command.category,
            product_type=command.product_type,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), name=product.name)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            price=command.price,
            category=command.category,
            product_type=command.product_type,
            image_url=command.image_url,
        )
        # Full replacement clears optional text the caller left out
        product.description = command.description
        if product.stock != command.stock:
            product.set_stock(command.stock)
        if command.active:
            product.activate()
        else:
            product.deactivate()
        repo.add(product)

    @handle(UpdateProductPartial)
    def update_product_partial(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            product_type=command.product_type,
            image_url=command.image_url,
        )
        if command.stock is not None and command.stock != product.stock:
            product.set_stock(command.stock)
        if command.active is True:
            product.activate()
        elif command.active is False:
            product.deactivate()
        repo.add(product)

    @handle(UpdateProductDescription)
    def update_description(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(description=command.description)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
        logger.info("Product deactivated", product_id=str(product.id))

    @handle(ToggleProductStatus)
    def toggle_status(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.toggle_active()
        repo.add(product)
        return product.active

    @handle(UpdateProductsStatus)
    def update_products_status(self, command):
        product_ids = (
            json.loads(command.product_ids) if isinstance(command.product_ids, str) else command.product_ids
        )
        repo = current_domain.repository_for(Product)
        updated = 0
        for product_id in product_ids:
            product = repo.get(product_id)
            if product.active != command.active:
                if command.active:
                    product.activate()
                else:
                    product.deactivate()
                repo.add(product)
            updated += 1
        logger.info("Bulk status update", count=updated, active=command.active)
        return updated

    @handle(PutProductOnSale)
    def put_on_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.start_sale(command.sale_price, command.sale_start, command.sale_end)
        repo.add(product)

    @handle(EndProductSale)
    def end_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.end_sale()
        repo.add(product)
