"""Basket aggregate: a shopper's cart that becomes an order at checkout.

Totals are derived. Every mutation ends in ``recompute_totals`` so that
``quantity``, ``subtotal`` and ``total`` always agree with the items, tax and
shipping. Status changes go through ``_transition`` and therefore through the
transition table in ``brewery.basket.status``.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from brewery.basket.events import (
    BasketCheckedOut,
    BasketCreated,
    BasketItemAdded,
    BasketItemQuantityChanged,
    BasketItemRemoved,
    BasketStatusChanged,
)
from brewery.basket.status import BasketStatus
from brewery.domain import brewery
from brewery.errors import AlreadyOrdered, EmptyBasket, InsufficientStock, InvalidTransition, ItemNotFound
from brewery.shared.money import multiply_money, round_money, sum_money, to_decimal

SHIPPING_ADDRESS_FIELDS = ("ship_address", "ship_city", "ship_state", "ship_zipcode", "ship_country")


@brewery.entity(part_of="Basket")
class BasketItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=25)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    option1 = Integer()
    option2 = Integer()

    @property
    def subtotal(self):
        return multiply_money(self.price, self.quantity)


@brewery.aggregate
class Basket:
    shopper_id = Identifier(required=True)
    items = HasMany(BasketItem)
    status = String(choices=BasketStatus, default=BasketStatus.ACTIVE.value)
    quantity = Integer(default=0)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total = Float(default=0.0)
    created_at = DateTime()
    ordered_at = DateTime()
    ship_address = String(max_length=100)
    ship_city = String(max_length=50)
    ship_state = String(max_length=2)
    ship_zipcode = String(max_length=15)
    ship_country = String(max_length=50)

    @classmethod
    def create(cls, shopper_id):
        now = datetime.now(UTC)
        basket = cls(shopper_id=shopper_id, status=BasketStatus.ACTIVE.value, created_at=now)
        basket.raise_(BasketCreated(basket_id=str(basket.id), shopper_id=str(shopper_id), created_at=now))
        return basket

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def current_status(self):
        return BasketStatus(self.status)

    @property
    def unique_item_count(self):
        return len(self.items)

    @property
    def is_empty(self):
        return not self.items

    def available_stock(self, product):
        """Stock this basket may draw on for ``product``.

        Once submitted the basket already holds its lines, so they count as available to it.
        """
        item = self.find_item(product.id)
        held = item.quantity if item is not None and self.current_status.is_ordered else 0
        return product.stock + held

    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def contains_product(self, product_id):
        return self.find_item(product_id) is not None

    @property
    def full_shipping_address(self):
        return ", ".join(getattr(self, f) for f in SHIPPING_ADDRESS_FIELDS if getattr(self, f))

    def recompute_totals(self):
        self.quantity = sum(item.quantity for item in self.items)
        self.subtotal = sum_money(item.subtotal for item in self.items)
        self.total = round_money(to_decimal(self.subtotal) + to_decimal(self.tax) + to_decimal(self.shipping))

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def _assert_modifiable(self):
        if not self.current_status.is_modifiable:
            raise ValidationError({"status": [f"Basket cannot be modified in status {self.status}"]})

    def add_item(self, product, quantity, option1=None, option2=None, price=None):
        """Add ``quantity`` of ``product``, merging with an existing line for the same product.

        The line keeps the price it was first added at: ``price`` when given,
        otherwise the product's current (sale) price.
        """
        self._assert_modifiable()
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not product.active:
            raise ValidationError({"product_id": [f"{product.name} is not available"]})

        existing = self.find_item(product.id)
        wanted = quantity + (existing.quantity if existing else 0)
        available = self.available_stock(product)
        if available < wanted:
            raise InsufficientStock(product.name, wanted, available)

        if existing:
            existing.quantity = wanted
            if option1 is not None:
                existing.option1 = option1
            if option2 is not None:
                existing.option2 = option2
            price = existing.price
        else:
            price = round_money(price if price is not None else product.current_price())
            self.add_items(
                BasketItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    price=price,
                    option1=option1,
                    option2=option2,
                )
            )

        self.recompute_totals()
        self.raise_(
            BasketItemAdded(basket_id=str(self.id), product_id=str(product.id), quantity=quantity, price=price)
        )

    def update_item_quantity(self, product, new_quantity):
        """Set the quantity of a line; zero or less removes it."""
        self._assert_modifiable()
        item = self.find_item(product.id)
        if item is None:
            raise ItemNotFound(self.id, product.id)

        if new_quantity <= 0:
            self.remove_item(product.id)
            return

        available = self.available_stock(product)
        if available < new_quantity:
            raise InsufficientStock(product.name, new_quantity, available)

        previous = item.quantity
        item.quantity = new_quantity
        self.recompute_totals()
        self.raise_(
            BasketItemQuantityChanged(
                basket_id=str(self.id),
                product_id=str(product.id),
                previous_quantity=previous,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        self._assert_modifiable()
        item = self.find_item(product_id)
        if item is None:
            raise ItemNotFound(self.id, product_id)

        self.remove_items(item)
        self.recompute_totals()
        self.raise_(BasketItemRemoved(basket_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._assert_modifiable()
        for item in list(self.items):
            self.remove_items(item)
        self.recompute_totals()

    # -------------------------------------------------------------------
    # Tax, shipping and address
    # -------------------------------------------------------------------
    def _assert_open(self):
        if self.current_status.is_completed:
            raise ValidationError({"status": [f"Charges cannot change on a {self.status} basket"]})

    def set_tax(self, amount):
        self._assert_open()
        if amount is None or amount < 0:
            raise ValidationError({"tax": ["Tax cannot be negative"]})
        self.tax = round_money(amount)
        self.recompute_totals()

    def set_shipping(self, amount):
        self._assert_open()
        if amount is None or amount < 0:
            raise ValidationError({"shipping": ["Shipping cannot be negative"]})
        self.shipping = round_money(amount)
        self.recompute_totals()

    def set_shipping_address(self, **address):
        for field in SHIPPING_ADDRESS_FIELDS:
            value = address.get(field)
            if value is not None:
                setattr(self, field, value)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def _transition(self, target):
        current = self.current_status
        if not current.can_transition_to(target):
            raise InvalidTransition(current.value, target.value)

        self.status = target.value
        if target is BasketStatus.ACTIVE:
            self.ordered_at = None
        elif target is BasketStatus.SUBMITTED or self.ordered_at is None:
            self.ordered_at = datetime.now(UTC)

        self.raise_(
            BasketStatusChanged(basket_id=str(self.id), previous_status=current.value, new_status=target.value)
        )

    def checkout(self, products):
        """Place the basket as an order.

        ``products`` maps product id to the current Product so stock can be
        re-validated at the moment of purchase.
        """
        if self.is_empty:
            raise EmptyBasket(self.id)
        if self.current_status is not BasketStatus.ACTIVE:
            raise AlreadyOrdered(self.id, self.status)

        for item in self.items:
            product = products[str(item.product_id)]
            if product.stock < item.quantity:
                raise InsufficientStock(product.name, item.quantity, product.stock)

        self.recompute_totals()
        self._transition(BasketStatus.SUBMITTED)
        self.raise_(
            BasketCheckedOut(
                basket_id=str(self.id),
                shopper_id=str(self.shopper_id),
                quantity=self.quantity,
                total=self.total,
                ordered_at=self.ordered_at,
            )
        )

    def finalize(self):
        self._transition(BasketStatus.CHECKED_OUT)

    def cancel(self):
        self._transition(BasketStatus.CANCELLED)

    def update_status(self, new_status):
        self._transition(BasketStatus.parse(new_status))
