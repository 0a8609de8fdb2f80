"""Basket management: creation, totals inputs and shipping address."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.basket.items import sync_held_stock
from brewery.catalogue.product import Product
from brewery.domain import brewery
from brewery.shopper.shopper import Shopper

logger = structlog.get_logger(__name__)


@brewery.command(part_of="Basket")
class CreateBasket:
    shopper_id = Identifier(required=True)


@brewery.command(part_of="Basket")
class ClearBasket:
    basket_id = Identifier(required=True)


@brewery.command(part_of="Basket")
class UpdateBasketTax:
    basket_id = Identifier(required=True)
    tax = Float(required=True, min_value=0.0)


@brewery.command(part_of="Basket")
class UpdateBasketShipping:
    basket_id = Identifier(required=True)
    shipping = Float(required=True, min_value=0.0)


@brewery.command(part_of="Basket")
class SetBasketShippingAddress:
    basket_id = Identifier(required=True)
    ship_address = String(max_length=100)
    ship_city = String(max_length=50)
    ship_state = String(max_length=2)
    ship_zipcode = String(max_length=15)
    ship_country = String(max_length=50)


@brewery.command_handler(part_of=Basket)
class ManageBasketHandler:
    @handle(CreateBasket)
    def create_basket(self, command):
        # Raises ObjectNotFoundError for unknown shoppers
        current_domain.repository_for(Shopper).get(command.shopper_id)

        basket = Basket.create(shopper_id=command.shopper_id)
        current_domain.repository_for(Basket).add(basket)
        logger.info("Basket created", basket_id=str(basket.id), shopper_id=str(command.shopper_id))
        return str(basket.id)

    @handle(ClearBasket)
    def clear_basket(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        held = {str(item.product_id): item.quantity for item in basket.items}
        basket.clear()
        if basket.current_status.is_ordered:
            product_repo = current_domain.repository_for(Product)
            for product_id, quantity in held.items():
                sync_held_stock(basket, product_repo.get(product_id), quantity)
        repo.add(basket)

    @handle(UpdateBasketTax)
    def update_tax(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        basket.set_tax(command.tax)
        repo.add(basket)
        return basket.total

    @handle(UpdateBasketShipping)
    def update_shipping(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        basket.set_shipping(command.shipping)
        repo.add(basket)
        return basket.total

    @handle(SetBasketShippingAddress)
    def set_shipping_address(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        basket.set_shipping_address(
            ship_address=command.ship_address,
            ship_city=command.ship_city,
            ship_state=command.ship_state,
            ship_zipcode=command.ship_zipcode,
            ship_country=command.ship_country,
        )
        repo.add(basket)
