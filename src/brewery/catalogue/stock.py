"""Stock adjustments.

The commands raise ``InsufficientStock`` like every other business rule.
``decrease_stock`` and ``increase_stock`` wrap them for callers that want a
yes/no answer: on failure the unit of work rolls back and stock is untouched.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from brewery.catalogue.product import Product
from brewery.domain import brewery
from brewery.errors import InsufficientStock

logger = structlog.get_logger(__name__)


@brewery.command(part_of="Product")
class UpdateStock:
    product_id = Identifier(required=True)
    stock = Integer(required=True, min_value=0)


@brewery.command(part_of="Product")
class DecreaseStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@brewery.command(part_of="Product")
class IncreaseStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@brewery.command_handler(part_of=Product)
class StockAdjustmentHandler:
    @handle(UpdateStock)
    def update_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.stock)
        repo.add(product)
        return product.stock

    @handle(DecreaseStock)
    def decrease_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.decrease_stock(command.quantity, reason="Adjustment")
        repo.add(product)
        return product.stock

    @handle(IncreaseStock)
    def increase_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.increase_stock(command.quantity)
        repo.add(product)
        return product.stock


def decrease_stock(product_id, quantity) -> bool:
    try:
        current_domain.process(DecreaseStock(product_id=product_id, quantity=quantity), asynchronous=False)
    except InsufficientStock as exc:
        logger.info("Stock decrease refused", product_id=str(product_id), requested=quantity, available=exc.available)
        return False
    return True


def increase_stock(product_id, quantity) -> bool:
    current_domain.process(IncreaseStock(product_id=product_id, quantity=quantity), asynchronous=False)
    return True


def is_stock_available(product_id, quantity) -> bool:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return False
    return product.is_stock_available(quantity)
