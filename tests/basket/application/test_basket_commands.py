"""Application tests for basket commands."""

import pytest
from brewery.basket.basket import Basket
from brewery.basket.checkout import CancelBasket, CheckoutBasket, FinalizeBasket, UpdateBasketStatus
from brewery.basket.items import RemoveBasketItem, UpdateBasketItemQuantity
from brewery.basket.management import (
    ClearBasket,
    CreateBasket,
    SetBasketShippingAddress,
    UpdateBasketShipping,
    UpdateBasketTax,
)
from brewery.catalogue.product import Product
from brewery.errors import AlreadyOrdered, EmptyBasket, InsufficientStock, InvalidTransition, ItemNotFound
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _basket(basket_id):
    return current_domain.repository_for(Basket).get(basket_id)


def _product(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestCreateBasket:
    def test_create_for_registered_shopper(self, register_shopper):
        shopper_id = register_shopper()
        basket_id = current_domain.process(CreateBasket(shopper_id=shopper_id), asynchronous=False)
        basket = _basket(basket_id)
        assert str(basket.shopper_id) == shopper_id
        assert basket.status == "ACTIVE"

    def test_unknown_shopper(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(CreateBasket(shopper_id="ghost"), asynchronous=False)


class TestItems:
    def test_add_then_update_then_remove(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(price=4.25, stock=10)

        add_item(basket_id, product_id, 2)
        assert _basket(basket_id).subtotal == 8.50

        current_domain.process(
            UpdateBasketItemQuantity(basket_id=basket_id, product_id=product_id, quantity=5), asynchronous=False
        )
        assert _basket(basket_id).quantity == 5

        current_domain.process(RemoveBasketItem(basket_id=basket_id, product_id=product_id), asynchronous=False)
        assert _basket(basket_id).is_empty

    def test_add_beyond_stock(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(stock=2)
        with pytest.raises(InsufficientStock):
            add_item(basket_id, product_id, 3)
        assert _basket(basket_id).is_empty

    def test_update_missing_line(self, create_basket, create_product):
        basket_id = create_basket()
        product_id = create_product()
        with pytest.raises(ItemNotFound):
            current_domain.process(
                UpdateBasketItemQuantity(basket_id=basket_id, product_id=product_id, quantity=1),
                asynchronous=False,
            )

    def test_clear(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(name="A"), 1)
        add_item(basket_id, create_product(name="B"), 1)
        current_domain.process(ClearBasket(basket_id=basket_id), asynchronous=False)
        assert _basket(basket_id).quantity == 0


class TestTaxAndShipping:
    def test_totals_follow_tax_and_shipping(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(price=20.00), 1)

        current_domain.process(UpdateBasketTax(basket_id=basket_id, tax=1.06), asynchronous=False)
        total = current_domain.process(UpdateBasketShipping(basket_id=basket_id, shipping=8.00), asynchronous=False)

        assert total == 29.06
        assert _basket(basket_id).total == 29.06

    def test_negative_tax_is_rejected(self, create_basket):
        with pytest.raises(ValidationError):
            current_domain.process(UpdateBasketTax(basket_id=create_basket(), tax=-2.0), asynchronous=False)

    def test_cancelled_basket_charges_cannot_change(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(price=20.00), 1)
        current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)

        with pytest.raises(ValidationError):
            current_domain.process(UpdateBasketTax(basket_id=basket_id, tax=1.06), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(UpdateBasketShipping(basket_id=basket_id, shipping=8.00), asynchronous=False)
        assert _basket(basket_id).total == 20.00

    def test_shipping_address(self, create_basket):
        basket_id = create_basket()
        current_domain.process(
            SetBasketShippingAddress(basket_id=basket_id, ship_address="9 Brew Ln", ship_city="Raleigh"),
            asynchronous=False,
        )
        assert _basket(basket_id).full_shipping_address == "9 Brew Ln, Raleigh"


class TestCheckout:
    def test_checkout_takes_stock(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(stock=10)
        add_item(basket_id, product_id, 3)

        status = current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)

        assert status == "SUBMITTED"
        assert _product(product_id).stock == 7
        assert _basket(basket_id).ordered_at is not None

    def test_failed_checkout_changes_nothing(self, create_basket, create_product, add_item):
        from brewery.catalogue.stock import UpdateStock

        basket_id = create_basket()
        plenty = create_product(name="Plenty", stock=10)
        scarce = create_product(name="Scarce", stock=5)
        add_item(basket_id, plenty, 2)
        add_item(basket_id, scarce, 4)
        current_domain.process(UpdateStock(product_id=scarce, stock=1), asynchronous=False)

        with pytest.raises(InsufficientStock) as exc:
            current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)

        assert exc.value.product_name == "Scarce"
        assert _basket(basket_id).status == "ACTIVE"
        assert _product(plenty).stock == 10
        assert _product(scarce).stock == 1

    def test_empty_basket(self, create_basket):
        with pytest.raises(EmptyBasket):
            current_domain.process(CheckoutBasket(basket_id=create_basket()), asynchronous=False)

    def test_already_ordered(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(), 1)
        current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
        with pytest.raises(AlreadyOrdered):
            current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)

    def test_finalize(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(), 1)
        current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
        status = current_domain.process(FinalizeBasket(basket_id=basket_id), asynchronous=False)
        assert status == "CHECKED_OUT"


class TestSubmittedBasketChanges:
    @pytest.fixture()
    def submitted(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(stock=10)
        add_item(basket_id, product_id, 4)
        current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
        return basket_id, product_id

    def test_adding_takes_only_the_extra_stock(self, submitted, add_item):
        basket_id, product_id = submitted
        add_item(basket_id, product_id, 6)
        assert _basket(basket_id).quantity == 10
        assert _product(product_id).stock == 0

    def test_held_stock_counts_towards_availability(self, submitted, add_item):
        basket_id, product_id = submitted
        with pytest.raises(InsufficientStock) as exc:
            add_item(basket_id, product_id, 7)
        assert exc.value.available == 10
        assert _product(product_id).stock == 6

    def test_lowering_a_line_returns_stock(self, submitted):
        basket_id, product_id = submitted
        current_domain.process(
            UpdateBasketItemQuantity(basket_id=basket_id, product_id=product_id, quantity=1), asynchronous=False
        )
        assert _product(product_id).stock == 9

    def test_removing_and_clearing_return_stock(self, submitted, create_product, add_item):
        basket_id, product_id = submitted
        other_id = create_product(name="Porter Kit", stock=5)
        add_item(basket_id, other_id, 2)
        assert _product(other_id).stock == 3

        current_domain.process(RemoveBasketItem(basket_id=basket_id, product_id=other_id), asynchronous=False)
        assert _product(other_id).stock == 5

        current_domain.process(ClearBasket(basket_id=basket_id), asynchronous=False)
        assert _product(product_id).stock == 10


class TestCancellation:
    def test_cancel_after_checkout_returns_stock(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(stock=10)
        add_item(basket_id, product_id, 4)
        current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
        assert _product(product_id).stock == 6

        current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)

        assert _basket(basket_id).status == "CANCELLED"
        assert _product(product_id).stock == 10

    def test_cancel_active_basket_leaves_stock_alone(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        product_id = create_product(stock=10)
        add_item(basket_id, product_id, 4)
        current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)
        assert _product(product_id).stock == 10

    def test_cancelled_basket_cannot_be_cancelled_again(self, create_basket):
        basket_id = create_basket()
        current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)
        with pytest.raises(InvalidTransition):
            current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)


class TestUpdateStatus:
    def test_walks_the_lifecycle(self, create_basket, create_product, add_item):
        basket_id = create_basket()
        add_item(basket_id, create_product(), 1)
        current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
        for status in ("CHECKED_OUT", "PROCESSING", "SHIPPED", "DELIVERED"):
            current_domain.process(UpdateBasketStatus(basket_id=basket_id, status=status), asynchronous=False)
        assert _basket(basket_id).status == "DELIVERED"

    def test_rejects_illegal_move(self, create_basket):
        with pytest.raises(InvalidTransition):
            current_domain.process(
                UpdateBasketStatus(basket_id=create_basket(), status="SHIPPED"), asynchronous=False
            )

    def test_rejects_unknown_status(self, create_basket):
        with pytest.raises(ValidationError):
            current_domain.process(UpdateBasketStatus(basket_id=create_basket(), status="LOST"), asynchronous=False)
