"""Shared BDD fixtures and step definitions for baskets."""

import pytest
from brewery.basket.basket import Basket
from brewery.basket.checkout import CheckoutBasket
from brewery.catalogue.product import Product
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured business-rule failures."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@given("a registered shopper", target_fixture="shopper_id")
def registered_shopper(register_shopper):
    return register_shopper()


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(create_product, products, name, price, stock):
    products[name] = create_product(name=name, price=price, stock=stock)


@given("the shopper has an empty basket", target_fixture="basket_id")
def empty_basket(create_basket, shopper_id):
    return create_basket(shopper_id)


@given(parsers.cfparse('the shopper has a basket with {quantity:d} of "{name}"'), target_fixture="basket_id")
def basket_with(create_basket, add_item, shopper_id, products, quantity, name):
    basket_id = create_basket(shopper_id)
    add_item(basket_id, products[name], quantity)
    return basket_id


@given("the shopper checks out")
def given_checked_out(basket_id):
    current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)


@then(parsers.cfparse('the basket status is "{status}"'))
def basket_status_is(basket_id, status):
    assert current_domain.repository_for(Basket).get(basket_id).status == status


@then(parsers.cfparse("the basket total is {total:f}"))
def basket_total_is(basket_id, total):
    assert current_domain.repository_for(Basket).get(basket_id).total == pytest.approx(total)


@then(parsers.cfparse("the basket holds {quantity:d} items"))
def basket_holds(basket_id, quantity):
    assert current_domain.repository_for(Basket).get(basket_id).quantity == quantity


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock_is(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock
