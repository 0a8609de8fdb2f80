"""Tests for the Basket aggregate."""

import pytest
from brewery.basket.basket import Basket
from brewery.basket.events import BasketCheckedOut, BasketItemAdded, BasketStatusChanged
from brewery.basket.status import BasketStatus
from brewery.catalogue.product import Product
from brewery.errors import AlreadyOrdered, EmptyBasket, InsufficientStock, InvalidTransition, ItemNotFound
from protean.exceptions import ValidationError


def _product(name="Stout Kit", price=10.00, stock=5):
    return Product.create(name=name, price=price, stock=stock)


def _basket():
    return Basket.create(shopper_id="shopper-001")


def _products(*products):
    return {str(p.id): p for p in products}


class TestCreation:
    def test_new_basket_is_empty_and_active(self):
        basket = _basket()
        assert basket.status == BasketStatus.ACTIVE.value
        assert basket.quantity == 0
        assert basket.subtotal == 0.0
        assert basket.total == 0.0
        assert basket.ordered_at is None


class TestAddItem:
    def test_add_item_updates_totals(self):
        basket = _basket()
        basket.add_item(_product(price=10.00), 2)
        assert basket.quantity == 2
        assert basket.subtotal == 20.00
        assert basket.total == 20.00

    def test_adding_same_product_merges_lines(self):
        basket = _basket()
        product = _product(stock=10)
        basket.add_item(product, 2)
        basket.add_item(product, 3)
        assert basket.unique_item_count == 1
        assert basket.items[0].quantity == 5
        assert basket.quantity == 5

    def test_price_is_snapshotted(self):
        basket = _basket()
        product = _product(price=10.00)
        basket.add_item(product, 1)
        product.update_details(price=99.00)
        assert basket.items[0].price == 10.00

    def test_explicit_price_overrides_current_price(self):
        basket = _basket()
        basket.add_item(_product(price=10.00), 2, price=7.50)
        assert basket.subtotal == 15.00

    def test_insufficient_stock_leaves_basket_unchanged(self):
        basket = _basket()
        product = _product(stock=3)
        basket.add_item(product, 2)
        with pytest.raises(InsufficientStock) as exc:
            basket.add_item(product, 2)
        assert exc.value.requested == 4
        assert exc.value.available == 3
        assert basket.quantity == 2
        assert basket.subtotal == 20.00

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _basket().add_item(_product(), 0)

    def test_inactive_product_cannot_be_added(self):
        product = _product()
        product.deactivate()
        with pytest.raises(ValidationError):
            _basket().add_item(product, 1)

    def test_add_raises_event(self):
        basket = _basket()
        basket.add_item(_product(), 1)
        assert any(isinstance(e, BasketItemAdded) for e in basket._events)

    def test_cannot_add_to_checked_out_basket(self):
        basket = _basket()
        product = _product()
        basket.add_item(product, 1)
        basket.checkout(_products(product))
        basket.finalize()
        with pytest.raises(ValidationError):
            basket.add_item(product, 1)


class TestUpdateQuantity:
    def test_update_quantity(self):
        basket = _basket()
        product = _product(stock=10)
        basket.add_item(product, 1)
        basket.update_item_quantity(product, 4)
        assert basket.quantity == 4
        assert basket.subtotal == 40.00

    def test_zero_removes_the_line(self):
        basket = _basket()
        product = _product()
        basket.add_item(product, 2)
        basket.update_item_quantity(product, 0)
        assert basket.is_empty
        assert basket.total == 0.0

    def test_missing_line_raises_item_not_found(self):
        with pytest.raises(ItemNotFound):
            _basket().update_item_quantity(_product(), 1)

    def test_update_beyond_stock(self):
        basket = _basket()
        product = _product(stock=3)
        basket.add_item(product, 1)
        with pytest.raises(InsufficientStock):
            basket.update_item_quantity(product, 4)
        assert basket.quantity == 1


class TestRemoveAndClear:
    def test_remove_item(self):
        basket = _basket()
        first, second = _product(name="A"), _product(name="B")
        basket.add_item(first, 1)
        basket.add_item(second, 2)
        basket.remove_item(first.id)
        assert basket.unique_item_count == 1
        assert not basket.contains_product(first.id)
        assert basket.contains_product(second.id)

    def test_remove_missing_item(self):
        with pytest.raises(ItemNotFound):
            _basket().remove_item("nope")

    def test_clear(self):
        basket = _basket()
        basket.add_item(_product(name="A"), 1)
        basket.add_item(_product(name="B"), 1)
        basket.set_shipping(5.00)
        basket.clear()
        assert basket.is_empty
        assert basket.subtotal == 0.0
        assert basket.total == 5.00


class TestTotals:
    def test_total_is_subtotal_plus_tax_plus_shipping(self):
        basket = _basket()
        basket.add_item(_product(price=12.50), 2)
        basket.set_tax(1.13)
        basket.set_shipping(8.00)
        assert basket.total == 34.13

    def test_negative_tax_rejected(self):
        with pytest.raises(ValidationError):
            _basket().set_tax(-1)

    def test_negative_shipping_rejected(self):
        with pytest.raises(ValidationError):
            _basket().set_shipping(-1)

    def test_charges_are_frozen_once_cancelled(self):
        basket = _basket()
        basket.add_item(_product(price=20.00), 1)
        basket.cancel()

        with pytest.raises(ValidationError):
            basket.set_tax(1.00)
        with pytest.raises(ValidationError):
            basket.set_shipping(5.00)
        assert (basket.tax, basket.shipping, basket.total) == (0.0, 0.0, 20.00)

    def test_checked_out_basket_still_takes_shipping(self):
        basket = _basket()
        product = _product(price=20.00)
        basket.add_item(product, 1)
        basket.checkout(_products(product))
        basket.finalize()

        basket.set_shipping(8.00)
        assert basket.total == 28.00

        for status in (BasketStatus.PROCESSING, BasketStatus.SHIPPED, BasketStatus.DELIVERED):
            basket.update_status(status)
        with pytest.raises(ValidationError):
            basket.set_shipping(0.0)
        assert basket.total == 28.00


class TestCheckout:
    def test_checkout_submits(self):
        basket = _basket()
        product = _product()
        basket.add_item(product, 1)
        basket.checkout(_products(product))
        assert basket.status == BasketStatus.SUBMITTED.value
        assert basket.ordered_at is not None
        assert any(isinstance(e, BasketCheckedOut) for e in basket._events)

    def test_empty_basket(self):
        with pytest.raises(EmptyBasket):
            _basket().checkout({})

    def test_checkout_twice(self):
        basket = _basket()
        product = _product()
        basket.add_item(product, 1)
        basket.checkout(_products(product))
        with pytest.raises(AlreadyOrdered):
            basket.checkout(_products(product))

    def test_stock_is_revalidated(self):
        basket = _basket()
        product = _product(name="Porter Kit", stock=5)
        basket.add_item(product, 4)
        product.set_stock(2)
        with pytest.raises(InsufficientStock) as exc:
            basket.checkout(_products(product))
        assert exc.value.product_name == "Porter Kit"
        assert basket.status == BasketStatus.ACTIVE.value


class TestLifecycle:
    def _submitted(self):
        basket = _basket()
        product = _product()
        basket.add_item(product, 1)
        basket.checkout(_products(product))
        return basket

    def test_finalize(self):
        basket = self._submitted()
        basket.finalize()
        assert basket.status == BasketStatus.CHECKED_OUT.value

    def test_finalize_requires_submission(self):
        with pytest.raises(InvalidTransition):
            _basket().finalize()

    def test_cancel_active_basket(self):
        basket = _basket()
        basket.cancel()
        assert basket.status == BasketStatus.CANCELLED.value
        assert basket.ordered_at is not None

    def test_cancel_twice(self):
        basket = _basket()
        basket.cancel()
        with pytest.raises(InvalidTransition):
            basket.cancel()

    def test_cannot_cancel_shipped(self):
        basket = self._submitted()
        for status in ("CHECKED_OUT", "PROCESSING", "SHIPPED"):
            basket.update_status(status)
        with pytest.raises(InvalidTransition):
            basket.cancel()

    def test_full_happy_path(self):
        basket = self._submitted()
        for status in ("CHECKED_OUT", "PROCESSING", "SHIPPED", "DELIVERED", "REFUNDED"):
            basket.update_status(status)
        assert basket.current_status.is_completed

    def test_illegal_status_change(self):
        with pytest.raises(InvalidTransition):
            _basket().update_status(BasketStatus.DELIVERED)

    def test_reopen_clears_ordered_at(self):
        basket = self._submitted()
        basket.update_status(BasketStatus.ACTIVE)
        assert basket.ordered_at is None

    def test_status_change_raises_event(self):
        basket = _basket()
        basket._events.clear()
        basket.cancel()
        event = basket._events[-1]
        assert isinstance(event, BasketStatusChanged)
        assert event.previous_status == "ACTIVE"
        assert event.new_status == "CANCELLED"


class TestShippingAddress:
    def test_full_shipping_address(self):
        basket = _basket()
        basket.set_shipping_address(ship_address="1 Main St", ship_city="Richmond", ship_state="VA")
        assert basket.full_shipping_address == "1 Main St, Richmond, VA"
