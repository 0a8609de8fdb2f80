"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from brewery.domain import brewery


@brewery.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)


@brewery.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String()
    price = Float()


@brewery.event(part_of="Product")
class StockLevelChanged:
    """Stock on hand moved, either by an order or by an adjustment."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(max_length=30)


@brewery.event(part_of="Product")
class ProductStatusChanged:
    __version__ = 1

    product_id = Identifier(required=True)
    active = Boolean(required=True)


@brewery.event(part_of="Product")
class ProductSaleScheduled:
    __version__ = 1

    product_id = Identifier(required=True)
    sale_price = Float(required=True)
    sale_start = DateTime(required=True)
    sale_end = DateTime(required=True)
