"""Storefront API package."""

from brewery.api.pricing import shipping_router, tax_router
from brewery.api.reports import report_router
from brewery.api.routes import basket_router, product_router, shopper_router

ROUTERS = (shopper_router, product_router, basket_router, tax_router, shipping_router, report_router)

__all__ = [
    "ROUTERS",
    "basket_router",
    "product_router",
    "report_router",
    "shipping_router",
    "shopper_router",
    "tax_router",
]
