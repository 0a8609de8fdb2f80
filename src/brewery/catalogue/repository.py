"""Read-side queries over the product catalogue."""

from datetime import UTC, datetime

from brewery.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from brewery.domain import brewery
from brewery.shared.money import multiply_money, round_money, sum_money

QUERY_LIMIT = 1000


def _matches(text, term):
    return bool(text) and term.lower() in text.lower()


@brewery.repository(part_of=Product)
class ProductRepository:
    def _fetch(self, **filters) -> list[Product]:
        query = self._dao.query.limit(QUERY_LIMIT)
        if filters:
            query = query.filter(**filters)
        return query.all().items

    def find_all(self) -> list[Product]:
        return sorted(self._fetch(), key=lambda p: p.name.lower())

    def find_active(self) -> list[Product]:
        return sorted(self._fetch(active=True), key=lambda p: p.name.lower())

    def find_inactive(self) -> list[Product]:
        return sorted(self._fetch(active=False), key=lambda p: p.name.lower())

    def search_by_name(self, term: str) -> list[Product]:
        return [p for p in self.find_active() if _matches(p.name, term)]

    def search_by_description(self, keyword: str) -> list[Product]:
        return [p for p in self.find_active() if _matches(p.description, keyword)]

    def search(self, term: str) -> list[Product]:
        """Active products whose name or description contains ``term``."""
        return [p for p in self.find_active() if _matches(p.name, term) or _matches(p.description, term)]

    def find_by_category_and_type(self, category: str | None = None, product_type: str | None = None) -> list[Product]:
        products = self.find_active()
        if category:
            products = [p for p in products if p.category and p.category.lower() == category.lower()]
        if product_type:
            products = [p for p in products if p.product_type == product_type]
        return products

    def find_by_category(self, category: str) -> list[Product]:
        return self.find_by_category_and_type(category=category)

    def find_by_type(self, product_type: str) -> list[Product]:
        return self.find_by_category_and_type(product_type=product_type)

    def find_in_stock(self) -> list[Product]:
        return [p for p in self.find_active() if p.stock > 0]

    def find_out_of_stock(self) -> list[Product]:
        return [p for p in self.find_active() if p.stock == 0]

    def find_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> list[Product]:
        return sorted((p for p in self.find_active() if p.stock <= threshold), key=lambda p: p.stock)

    def find_by_price_range(self, min_price: float, max_price: float) -> list[Product]:
        return sorted(
            (p for p in self.find_active() if min_price <= p.price <= max_price),
            key=lambda p: p.price,
        )

    def find_on_sale(self, at: datetime | None = None) -> list[Product]:
        moment = at or datetime.now(UTC)
        return [p for p in self.find_active() if p.is_on_sale(moment)]

    # -------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------
    def count_active(self) -> int:
        return len(self.find_active())

    def total_stock(self) -> int:
        return sum(p.stock for p in self.find_active())

    def average_price(self) -> float:
        products = self.find_active()
        if not products:
            return 0.0
        return round_money(sum_money(p.price for p in products) / len(products))

    def count_by_category(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for product in self.find_active():
            key = product.category or "Uncategorized"
            counts[key] = counts.get(key, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: kv[1], reverse=True))

    def total_stock_value(self) -> float:
        return sum_money(multiply_money(p.price, p.stock) for p in self.find_active())
