"""Headline numbers for the back-office dashboard."""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.basket.status import BasketStatus
from brewery.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from brewery.reports.sales import ordered_baskets
from brewery.shared.money import sum_money
from brewery.shopper.shopper import Shopper


@dataclass(frozen=True)
class Dashboard:
    active_products: int
    total_customers: int
    submitted_baskets: int
    orders_today: int
    revenue_today: float
    revenue_this_month: float
    low_stock_products: int


def dashboard(now=None, low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD) -> Dashboard:
    now = now or datetime.now(UTC)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)

    today = ordered_baskets(start_of_day, now)
    this_month = ordered_baskets(start_of_month, now)
    products = current_domain.repository_for(Product)

    return Dashboard(
        active_products=products.count_active(),
        total_customers=current_domain.repository_for(Shopper).count(),
        submitted_baskets=len(current_domain.repository_for(Basket).find_by_status(BasketStatus.SUBMITTED)),
        orders_today=len(today),
        revenue_today=sum_money(b.total for b in today),
        revenue_this_month=sum_money(b.total for b in this_month),
        low_stock_products=len(products.find_low_stock(low_stock_threshold)),
    )
