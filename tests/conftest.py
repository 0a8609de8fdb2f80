import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path or "/api/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def brewery_bed():
    from brewery.domain import brewery

    bed = DomainFixture(brewery)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(brewery_bed):
    with brewery_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Builders that go through the command handlers
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_shopper():
    from brewery.shopper.registration import RegisterShopper
    from protean import current_domain

    counter = {"n": 0}

    def _register(**overrides):
        counter["n"] += 1
        defaults = {
            "first_name": "Dana",
            "last_name": "Hops",
            "email": f"shopper{counter['n']}@example.com",
            "state": "VA",
        }
        defaults.update(overrides)
        return current_domain.process(RegisterShopper(**defaults), asynchronous=False)

    return _register


@pytest.fixture()
def create_product():
    from brewery.catalogue.management import CreateProduct
    from protean import current_domain

    def _create(**overrides):
        defaults = {"name": "Pale Ale Kit", "price": 10.00, "stock": 10, "category": "Kits", "product_type": "E"}
        defaults.update(overrides)
        return current_domain.process(CreateProduct(**defaults), asynchronous=False)

    return _create


@pytest.fixture()
def create_basket(register_shopper):
    from brewery.basket.management import CreateBasket
    from protean import current_domain

    def _create(shopper_id=None):
        shopper_id = shopper_id or register_shopper()
        return current_domain.process(CreateBasket(shopper_id=shopper_id), asynchronous=False)

    return _create


@pytest.fixture()
def add_item():
    from brewery.basket.items import AddItemToBasket
    from protean import current_domain

    def _add(basket_id, product_id, quantity=1, **extra):
        current_domain.process(
            AddItemToBasket(basket_id=basket_id, product_id=product_id, quantity=quantity, **extra),
            asynchronous=False,
        )

    return _add
