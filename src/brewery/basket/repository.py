"""Basket queries and order statistics."""

from datetime import UTC, datetime, timedelta

from brewery.basket.basket import Basket
from brewery.basket.status import BasketStatus, is_order_placed
from brewery.catalogue.product import as_utc
from brewery.domain import brewery
from brewery.shared.money import round_money, sum_money

QUERY_LIMIT = 1000
DEFAULT_RECENT_DAYS = 7
DEFAULT_ABANDONED_AFTER = timedelta(hours=24)


def _newest_first(baskets):
    epoch = datetime.min.replace(tzinfo=UTC)
    return sorted(baskets, key=lambda b: as_utc(b.created_at) or epoch, reverse=True)


def _within(moment, start, end):
    moment = as_utc(moment)
    return moment is not None and as_utc(start) <= moment <= as_utc(end)


@brewery.repository(part_of=Basket)
class BasketRepository:
    def _fetch(self, **filters) -> list[Basket]:
        query = self._dao.query.limit(QUERY_LIMIT)
        if filters:
            query = query.filter(**filters)
        return query.all().items

    def find_all(self) -> list[Basket]:
        return _newest_first(self._fetch())

    def find_by_shopper(self, shopper_id) -> list[Basket]:
        return _newest_first(self._fetch(shopper_id=str(shopper_id)))

    def find_active_for_shopper(self, shopper_id) -> Basket | None:
        active = [b for b in self.find_by_shopper(shopper_id) if b.status == BasketStatus.ACTIVE.value]
        return active[0] if active else None

    def find_by_status(self, status) -> list[Basket]:
        return _newest_first(self._fetch(status=BasketStatus.parse(status).value))

    def find_ordered(self) -> list[Basket]:
        """Baskets that count as placed orders in sales figures."""
        return [b for b in self.find_all() if is_order_placed(b.status)]

    def find_created_between(self, start, end) -> list[Basket]:
        return [b for b in self.find_all() if _within(b.created_at, start, end)]

    def find_ordered_between(self, start, end) -> list[Basket]:
        return [b for b in self.find_ordered() if _within(b.ordered_at, start, end)]

    def find_with_minimum_total(self, minimum: float) -> list[Basket]:
        return sorted((b for b in self.find_all() if b.total >= minimum), key=lambda b: b.total, reverse=True)

    def find_recent(self, days: int = DEFAULT_RECENT_DAYS) -> list[Basket]:
        since = datetime.now(UTC) - timedelta(days=days)
        return [b for b in self.find_all() if as_utc(b.created_at) and as_utc(b.created_at) >= since]

    def find_abandoned(self, older_than: timedelta = DEFAULT_ABANDONED_AFTER) -> list[Basket]:
        """Active, non-empty baskets nobody has touched since the cutoff."""
        cutoff = datetime.now(UTC) - older_than
        return [
            b
            for b in self.find_by_status(BasketStatus.ACTIVE)
            if b.items and as_utc(b.created_at) and as_utc(b.created_at) < cutoff
        ]

    def find_containing_product(self, product_id) -> list[Basket]:
        return [b for b in self.find_all() if b.contains_product(product_id)]

    # -------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------
    def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in BasketStatus}
        for basket in self._fetch():
            counts[basket.status] += 1
        return counts

    def revenue_by_status(self) -> dict[str, float]:
        totals: dict[str, list[float]] = {status.value: [] for status in BasketStatus}
        for basket in self._fetch():
            totals[basket.status].append(basket.total)
        return {status: sum_money(values) for status, values in totals.items()}

    def average_value_by_status(self) -> dict[str, float]:
        grouped: dict[str, list[float]] = {}
        for basket in self._fetch():
            grouped.setdefault(basket.status, []).append(basket.total)
        return {status: round_money(sum_money(values) / len(values)) for status, values in grouped.items()}

    def total_purchases(self, shopper_id) -> float:
        return sum_money(b.total for b in self.find_by_shopper(shopper_id) if is_order_placed(b.status))

    def item_count(self, basket_id) -> int:
        return self.get(basket_id).unique_item_count

    def total_quantity(self, basket_id) -> int:
        return self.get(basket_id).quantity

    def sales_in_period(self, start, end) -> float:
        return sum_money(b.total for b in self.find_ordered_between(start, end))
