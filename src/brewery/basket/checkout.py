"""Checkout and the rest of the order lifecycle.

``CheckoutBasket`` places the order and takes the stock in one unit of work:
either the basket moves to SUBMITTED and every product loses exactly the
ordered quantity, or nothing changes.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.basket.status import BasketStatus
from brewery.catalogue.product import Product
from brewery.domain import brewery

logger = structlog.get_logger(__name__)


@brewery.command(part_of="Basket")
class CheckoutBasket:
    basket_id = Identifier(required=True)


@brewery.command(part_of="Basket")
class FinalizeBasket:
    """Confirm a submitted order (SUBMITTED -> CHECKED_OUT)."""

    basket_id = Identifier(required=True)


@brewery.command(part_of="Basket")
class CancelBasket:
    basket_id = Identifier(required=True)


@brewery.command(part_of="Basket")
class UpdateBasketStatus:
    basket_id = Identifier(required=True)
    status = String(required=True, choices=BasketStatus)


def _return_stock(basket):
    product_repo = current_domain.repository_for(Product)
    for item in basket.items:
        product = product_repo.get(item.product_id)
        product.increase_stock(item.quantity, reason="Cancellation")
        product_repo.add(product)


@brewery.command_handler(part_of=Basket)
class BasketLifecycleHandler:
    @handle(CheckoutBasket)
    def checkout(self, command):
        repo = current_domain.repository_for(Basket)
        product_repo = current_domain.repository_for(Product)

        basket = repo.get(command.basket_id)
        products = {str(item.product_id): product_repo.get(item.product_id) for item in basket.items}

        basket.checkout(products)
        for item in basket.items:
            product = products[str(item.product_id)]
            product.decrease_stock(item.quantity)
            product_repo.add(product)
        repo.add(basket)

        logger.info(
            "Basket checked out",
            basket_id=str(basket.id),
            shopper_id=str(basket.shopper_id),
            total=basket.total,
        )
        return basket.status

    @handle(FinalizeBasket)
    def finalize(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        basket.finalize()
        repo.add(basket)
        return basket.status

    @handle(CancelBasket)
    def cancel(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        stock_taken = basket.current_status.is_ordered
        basket.cancel()

        # Stock left the shelf at checkout; put it back
        if stock_taken:
            _return_stock(basket)
        repo.add(basket)
        logger.info("Basket cancelled", basket_id=str(basket.id))
        return basket.status

    @handle(UpdateBasketStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        stock_taken = basket.current_status.is_ordered
        basket.update_status(command.status)
        if stock_taken and basket.current_status in (BasketStatus.CANCELLED, BasketStatus.ACTIVE):
            _return_stock(basket)
        repo.add(basket)
        return basket.status
