"""Stock reporting over the active catalogue."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from brewery.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from brewery.reports.sales import product_sales_report


@dataclass(frozen=True)
class StockLine:
    product_id: str
    name: str
    stock: int
    price: float
    total_sold: int
    stock_value: float


def stock_report() -> list[StockLine]:
    sold = {row.product_id: row.quantity_sold for row in product_sales_report()}
    return [
        StockLine(
            product_id=str(p.id),
            name=p.name,
            stock=p.stock,
            price=p.price,
            total_sold=sold.get(str(p.id), 0),
            stock_value=p.stock_value,
        )
        for p in current_domain.repository_for(Product).find_active()
    ]


def low_stock_report(threshold=DEFAULT_LOW_STOCK_THRESHOLD) -> list[StockLine]:
    return sorted((line for line in stock_report() if line.stock <= threshold), key=lambda line: line.stock)


def top_selling_products(limit=10) -> list[Product]:
    repo = current_domain.repository_for(Product)
    return [repo.get(row.product_id) for row in product_sales_report()[:limit]]
