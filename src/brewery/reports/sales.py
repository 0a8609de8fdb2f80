"""Sales reporting: purchases per shopper, product sales and revenue by period.

Only baskets that count as placed orders are included (see
``brewery.basket.status.is_order_placed``).
"""

import csv
import io
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum

from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.catalogue.product import Product, as_utc
from brewery.shared.money import round_money, sum_money
from brewery.shopper.shopper import Shopper


class Period(Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    def bucket(self, moment):
        if self is Period.DAILY:
            return moment.strftime("%Y-%m-%d")
        if self is Period.WEEKLY:
            year, week, _ = moment.isocalendar()
            return f"{year}-W{week:02d}"
        if self is Period.MONTHLY:
            return moment.strftime("%Y-%m")
        return moment.strftime("%Y")


@dataclass(frozen=True)
class PurchaseSummary:
    shopper_id: str
    shopper_name: str
    email: str
    order_count: int
    total_spent: float
    last_order_at: datetime | None = None


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    product_name: str
    quantity_sold: int
    revenue: float
    unique_customers: int


@dataclass(frozen=True)
class RevenueBucket:
    period: str
    order_count: int
    subtotal: float
    tax: float
    shipping: float
    total: float


@dataclass(frozen=True)
class SalesStatistics:
    start: datetime
    end: datetime
    order_count: int
    total_revenue: float
    average_order_value: float
    items_sold: int
    statuses: dict[str, int] = field(default_factory=dict)


def ordered_baskets(start=None, end=None) -> list[Basket]:
    repo = current_domain.repository_for(Basket)
    if start is None and end is None:
        return repo.find_ordered()
    return repo.find_ordered_between(
        start or datetime.min.replace(tzinfo=UTC),
        end or datetime.now(UTC),
    )


def purchase_report(shopper_id=None, start=None, end=None) -> list[PurchaseSummary]:
    grouped: dict[str, list[Basket]] = {}
    for basket in ordered_baskets(start, end):
        if shopper_id and str(basket.shopper_id) != str(shopper_id):
            continue
        grouped.setdefault(str(basket.shopper_id), []).append(basket)

    shopper_repo = current_domain.repository_for(Shopper)
    report = []
    for sid, baskets in grouped.items():
        shopper = shopper_repo.get(sid)
        report.append(
            PurchaseSummary(
                shopper_id=sid,
                shopper_name=shopper.full_name,
                email=shopper.email,
                order_count=len(baskets),
                total_spent=sum_money(b.total for b in baskets),
                last_order_at=max(as_utc(b.ordered_at) for b in baskets),
            )
        )
    return sorted(report, key=lambda s: s.total_spent, reverse=True)


def top_customers(limit=10) -> list[PurchaseSummary]:
    return purchase_report()[:limit]


def product_sales_report(start=None, end=None) -> list[ProductSales]:
    quantities: dict[str, int] = {}
    revenues: dict[str, list[float]] = {}
    customers: dict[str, set] = {}
    for basket in ordered_baskets(start, end):
        for item in basket.items:
            pid = str(item.product_id)
            quantities[pid] = quantities.get(pid, 0) + item.quantity
            revenues.setdefault(pid, []).append(item.subtotal)
            customers.setdefault(pid, set()).add(str(basket.shopper_id))

    product_repo = current_domain.repository_for(Product)
    report = [
        ProductSales(
            product_id=pid,
            product_name=product_repo.get(pid).name,
            quantity_sold=quantity,
            revenue=sum_money(revenues[pid]),
            unique_customers=len(customers[pid]),
        )
        for pid, quantity in quantities.items()
    ]
    return sorted(report, key=lambda p: (p.quantity_sold, p.revenue), reverse=True)


def best_sellers(limit=10) -> list[ProductSales]:
    return product_sales_report()[:limit]


def quantity_sold(product_id) -> int:
    return sum(
        item.quantity
        for basket in ordered_baskets()
        for item in basket.items
        if str(item.product_id) == str(product_id)
    )


def revenue_report(period=Period.MONTHLY, start=None, end=None) -> list[RevenueBucket]:
    period = Period(period) if not isinstance(period, Period) else period
    grouped: dict[str, list[Basket]] = {}
    for basket in ordered_baskets(start, end):
        grouped.setdefault(period.bucket(as_utc(basket.ordered_at)), []).append(basket)

    return [
        RevenueBucket(
            period=key,
            order_count=len(baskets),
            subtotal=sum_money(b.subtotal for b in baskets),
            tax=sum_money(b.tax for b in baskets),
            shipping=sum_money(b.shipping for b in baskets),
            total=sum_money(b.total for b in baskets),
        )
        for key, baskets in sorted(grouped.items())
    ]


def sales_statistics(start, end) -> SalesStatistics:
    baskets = ordered_baskets(start, end)
    revenue = sum_money(b.total for b in baskets)
    statuses: dict[str, int] = {}
    for basket in baskets:
        statuses[basket.status] = statuses.get(basket.status, 0) + 1
    return SalesStatistics(
        start=start,
        end=end,
        order_count=len(baskets),
        total_revenue=revenue,
        average_order_value=round_money(revenue / len(baskets)) if baskets else 0.0,
        items_sold=sum(b.quantity for b in baskets),
        statuses=statuses,
    )


SALES_EXPORT_COLUMNS = ("basket_id", "shopper_id", "ordered_at", "status", "quantity", "subtotal", "tax", "shipping", "total")


def export_sales_csv(start=None, end=None) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(SALES_EXPORT_COLUMNS)
    for basket in sorted(ordered_baskets(start, end), key=lambda b: as_utc(b.ordered_at)):
        writer.writerow(
            [
                str(basket.id),
                str(basket.shopper_id),
                as_utc(basket.ordered_at).isoformat(),
                basket.status,
                basket.quantity,
                f"{basket.subtotal:.2f}",
                f"{basket.tax:.2f}",
                f"{basket.shipping:.2f}",
                f"{basket.total:.2f}",
            ]
        )
    return buffer.getvalue()


def as_dicts(rows):
    return [asdict(row) for row in rows]
