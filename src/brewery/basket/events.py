"""Domain events for the Basket aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from brewery.domain import brewery


@brewery.event(part_of="Basket")
class BasketCreated:
    __version__ = 1

    basket_id = Identifier(required=True)
    shopper_id = Identifier(required=True)
    created_at = DateTime(required=True)


@brewery.event(part_of="Basket")
class BasketItemAdded:
    """A product was added to a basket, or its quantity grew."""

    __version__ = 1

    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)


@brewery.event(part_of="Basket")
class BasketItemQuantityChanged:
    __version__ = 1

    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@brewery.event(part_of="Basket")
class BasketItemRemoved:
    __version__ = 1

    basket_id = Identifier(required=True)
    product_id = Identifier(required=True)


@brewery.event(part_of="Basket")
class BasketCheckedOut:
    """The shopper placed the basket as an order."""

    __version__ = 1

    basket_id = Identifier(required=True)
    shopper_id = Identifier(required=True)
    quantity = Integer(required=True)
    total = Float(required=True)
    ordered_at = DateTime(required=True)


@brewery.event(part_of="Basket")
class BasketStatusChanged:
    __version__ = 1

    basket_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
