"""Named datastore routines.

The storefront exposes five routines by name with a fixed parameter order.
``ProcedureGateway`` checks the call against the declared signature, runs the
routine inside the domain, and reports any failure as ``UpstreamFailure``.
Failures are not retried.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.basket.items import AddItemToBasket
from brewery.catalogue.management import CreateProduct, UpdateProductDescription
from brewery.catalogue.product import Product
from brewery.errors import UpstreamFailure

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProcedureSignature:
    name: str
    parameters: tuple[str, ...]
    returns: type | None = None


BASKET_ADD = ProcedureSignature(
    "basket_add_sp", ("basket_id", "product_id", "price", "quantity", "option1", "option2")
)
PRODUCT_DESCRIPTION_UPDATE = ProcedureSignature("prod_description_update_sp", ("product_id", "description"))
PRODUCT_ADD = ProcedureSignature("prod_add_sp", ("name", "price", "description", "stock"))
TOTAL_PURCHASES = ProcedureSignature("tot_purch_sf", ("shopper_id",), float)
CHECK_SALE = ProcedureSignature("ck_sale_sf", ("product_id",), int)

SIGNATURES = {s.name: s for s in (BASKET_ADD, PRODUCT_DESCRIPTION_UPDATE, PRODUCT_ADD, TOTAL_PURCHASES, CHECK_SALE)}


def _basket_add(basket_id, product_id, price, quantity, option1, option2):
    current_domain.process(
        AddItemToBasket(
            basket_id=basket_id,
            product_id=product_id,
            price=price,
            quantity=quantity,
            option1=option1,
            option2=option2,
        ),
        asynchronous=False,
    )


def _product_description_update(product_id, description):
    current_domain.process(UpdateProductDescription(product_id=product_id, description=description), asynchronous=False)


def _product_add(name, price, description, stock):
    current_domain.process(
        CreateProduct(name=name, price=price, description=description, stock=stock), asynchronous=False
    )


def _total_purchases(shopper_id):
    return current_domain.repository_for(Basket).total_purchases(shopper_id)


def _check_sale(product_id):
    product = current_domain.repository_for(Product).get(product_id)
    return 1 if product.is_on_sale() else 0


DEFAULT_ROUTINES: dict[str, Callable] = {
    BASKET_ADD.name: _basket_add,
    PRODUCT_DESCRIPTION_UPDATE.name: _product_description_update,
    PRODUCT_ADD.name: _product_add,
    TOTAL_PURCHASES.name: _total_purchases,
    CHECK_SALE.name: _check_sale,
}


class ProcedureGateway:
    def __init__(self, routines: dict[str, Callable] | None = None):
        self._routines = dict(DEFAULT_ROUTINES if routines is None else routines)

    def call(self, name, *args):
        signature = SIGNATURES.get(name)
        if signature is None or name not in self._routines:
            raise UpstreamFailure(name, "unknown routine")
        if len(args) != len(signature.parameters):
            raise UpstreamFailure(
                name, f"expected {len(signature.parameters)} arguments ({', '.join(signature.parameters)}), got {len(args)}"
            )

        try:
            result = self._routines[name](*args)
        except Exception as exc:
            logger.warning("Routine failed", routine=name, error=str(exc))
            raise UpstreamFailure(name, exc) from exc

        return signature.returns(result) if signature.returns is not None else None

    # Typed entry points, one per routine

    def basket_add(self, basket_id, product_id, price, quantity, option1=None, option2=None):
        self.call(BASKET_ADD.name, basket_id, product_id, price, quantity, option1, option2)

    def update_product_description(self, product_id, description):
        self.call(PRODUCT_DESCRIPTION_UPDATE.name, product_id, description)

    def add_product(self, name, price, description, stock):
        self.call(PRODUCT_ADD.name, name, price, description, stock)

    def total_purchases(self, shopper_id) -> float:
        return self.call(TOTAL_PURCHASES.name, shopper_id)

    def check_sale(self, product_id) -> int:
        return self.call(CHECK_SALE.name, product_id)
