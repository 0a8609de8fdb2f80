"""Basket line items: commands and handler.

A submitted basket has already taken its stock, so line changes on it move
the product's stock by the difference in the same unit of work.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.catalogue.product import Product
from brewery.domain import brewery


@brewery.command(part_of="Basket")
class AddItemToBasket:
    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    option1 = Integer()
    option2 = Integer()
    price = Float(min_value=0.0)  # Overrides the product's current price when set


@brewery.command(part_of="Basket")
class UpdateBasketItemQuantity:
    """Set a line's quantity. Zero removes the line."""

    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@brewery.command(part_of="Basket")
class RemoveBasketItem:
    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _line_quantity(basket, product_id):
    item = basket.find_item(product_id)
    return item.quantity if item is not None else 0


def sync_held_stock(basket, product, held_before):
    """Move ``product`` stock by the change in what ``basket`` holds of it."""
    if not basket.current_status.is_ordered:
        return

    delta = _line_quantity(basket, product.id) - held_before
    if delta > 0:
        product.decrease_stock(delta, reason="Order change")
    elif delta < 0:
        product.increase_stock(-delta, reason="Order change")
    else:
        return
    current_domain.repository_for(Product).add(product)


@brewery.command_handler(part_of=Basket)
class BasketItemsHandler:
    @handle(AddItemToBasket)
    def add_item(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        product = current_domain.repository_for(Product).get(command.product_id)
        held = _line_quantity(basket, product.id)
        basket.add_item(
            product,
            command.quantity,
            option1=command.option1,
            option2=command.option2,
            price=command.price,
        )
        sync_held_stock(basket, product, held)
        repo.add(basket)

    @handle(UpdateBasketItemQuantity)
    def update_item_quantity(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        product = current_domain.repository_for(Product).get(command.product_id)
        held = _line_quantity(basket, product.id)
        basket.update_item_quantity(product, command.quantity)
        sync_held_stock(basket, product, held)
        repo.add(basket)

    @handle(RemoveBasketItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(Basket)
        basket = repo.get(command.basket_id)
        held = _line_quantity(basket, command.product_id)
        basket.remove_item(command.product_id)
        if basket.current_status.is_ordered:
            product = current_domain.repository_for(Product).get(command.product_id)
            sync_held_stock(basket, product, held)
        repo.add(basket)
