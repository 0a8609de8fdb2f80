"""Product aggregate: an item for sale with price, stock and an optional sale window.

Stock never goes negative. ``decrease_stock`` checks and writes in one call,
so a caller cannot observe a passing check and then lose the write to
another request inside the same unit of work.
"""

import os
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from brewery.catalogue.events import (
    ProductAdded,
    ProductDetailsUpdated,
    ProductSaleScheduled,
    ProductStatusChanged,
    StockLevelChanged,
)
from brewery.domain import brewery
from brewery.errors import InsufficientStock
from brewery.shared.money import multiply_money, round_money

DEFAULT_LOW_STOCK_THRESHOLD = int(os.environ.get("BREWERY_LOW_STOCK_THRESHOLD", "5"))

DETAIL_FIELDS = ("name", "description", "price", "category", "product_type", "image_url")


def as_utc(moment):
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@brewery.aggregate
class Product:
    name = String(required=True, max_length=25)
    description = String(max_length=100)
    price = Float(required=True)
    stock = Integer(default=0, min_value=0)
    active = Boolean(default=True)
    sale_price = Float()
    sale_start = DateTime()
    sale_end = DateTime()
    category = String(max_length=20)
    product_type = String(max_length=1)
    image_url = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is None or self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def sale_window_must_be_ordered(self):
        if self.sale_start and self.sale_end and as_utc(self.sale_end) <= as_utc(self.sale_start):
            raise ValidationError({"sale_end": ["Sale end must be after sale start"]})

    @classmethod
    def create(cls, name, price, description=None, stock=0, category=None, product_type=None, image_url=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=round_money(price),
            stock=stock or 0,
            active=True,
            category=category,
            product_type=product_type,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                stock=product.stock,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    def is_on_sale(self, at=None):
        if self.sale_price is None or self.sale_start is None or self.sale_end is None:
            return False
        moment = as_utc(at) if at else datetime.now(UTC)
        return as_utc(self.sale_start) <= moment < as_utc(self.sale_end)

    def current_price(self, at=None):
        return self.sale_price if self.is_on_sale(at) else self.price

    @property
    def is_in_stock(self):
        return self.stock > 0

    def is_low_stock(self, threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        return self.stock <= threshold

    def is_stock_available(self, quantity):
        return self.stock >= quantity

    @property
    def stock_value(self):
        return multiply_money(self.price, self.stock)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def _change_stock(self, new_stock, reason):
        previous = self.stock
        self.stock = new_stock
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockLevelChanged(
                product_id=str(self.id),
                previous_stock=previous,
                new_stock=new_stock,
                reason=reason,
            )
        )

    def decrease_stock(self, quantity, reason="Order"):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if self.stock < quantity:
            raise InsufficientStock(self.name, quantity, self.stock)
        self._change_stock(self.stock - quantity, reason)

    def increase_stock(self, quantity, reason="Restock"):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        self._change_stock(self.stock + quantity, reason)

    def set_stock(self, stock):
        if stock is None or stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})
        self._change_stock(stock, "Adjustment")

    # -------------------------------------------------------------------
    # Details and status
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        touched = False
        for field in DETAIL_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            setattr(self, field, round_money(value) if field == "price" else value)
            touched = True

        if touched:
            self.updated_at = datetime.now(UTC)
            self.raise_(ProductDetailsUpdated(product_id=str(self.id), name=self.name, price=self.price))

    def _set_active(self, active):
        if self.active == active:
            return
        self.active = active
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductStatusChanged(product_id=str(self.id), active=active))

    def activate(self):
        self._set_active(True)

    def deactivate(self):
        self._set_active(False)

    def toggle_active(self):
        self._set_active(not self.active)

    def start_sale(self, sale_price, sale_start, sale_end):
        if sale_price is None or sale_price <= 0:
            raise ValidationError({"sale_price": ["Sale price must be greater than zero"]})
        if sale_price >= self.price:
            raise ValidationError({"sale_price": ["Sale price must be lower than the regular price"]})
        if as_utc(sale_end) <= as_utc(sale_start):
            raise ValidationError({"sale_end": ["Sale end must be after sale start"]})

        # Invariants run per assignment; drop the old window first
        self.sale_start = None
        self.sale_end = None
        self.sale_price = round_money(sale_price)
        self.sale_start = sale_start
        self.sale_end = sale_end
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductSaleScheduled(
                product_id=str(self.id),
                sale_price=self.sale_price,
                sale_start=sale_start,
                sale_end=sale_end,
            )
        )

    def end_sale(self):
        self.sale_price = None
        self.sale_start = None
        self.sale_end = None
        self.updated_at = datetime.now(UTC)
