"""Queries over tax configurations and applied taxes."""

from brewery.domain import brewery
from brewery.shared.money import round_money, sum_money
from brewery.tax.rates import normalize_jurisdiction
from brewery.tax.tax import AppliedTax, TaxConfiguration

QUERY_LIMIT = 1000


@brewery.repository(part_of=TaxConfiguration)
class TaxConfigurationRepository:
    def _fetch(self, **filters) -> list[TaxConfiguration]:
        query = self._dao.query.limit(QUERY_LIMIT)
        if filters:
            query = query.filter(**filters)
        return query.all().items

    def find_active(self) -> list[TaxConfiguration]:
        return sorted(self._fetch(active=True), key=lambda c: c.state)

    def find_active_for_state(self, state) -> TaxConfiguration | None:
        """The configuration currently charged in ``state`` (case-insensitive)."""
        matches = self._fetch(state=normalize_jurisdiction(state), active=True)
        return matches[0] if matches else None

    def find_for_state(self, state) -> list[TaxConfiguration]:
        return self._fetch(state=normalize_jurisdiction(state))

    def has_configuration(self, state) -> bool:
        return self.find_active_for_state(state) is not None

    def states(self) -> list[str]:
        return sorted({c.state for c in self.find_active()})

    def find_ordered_by_rate(self) -> list[TaxConfiguration]:
        return sorted(self.find_active(), key=lambda c: c.rate, reverse=True)

    def find_by_percentage_range(self, minimum: float, maximum: float) -> list[TaxConfiguration]:
        return [c for c in self.find_ordered_by_rate() if minimum <= c.rate_percentage <= maximum]

    def search_by_description(self, term: str) -> list[TaxConfiguration]:
        term = term.lower()
        return [c for c in self.find_active() if c.description and term in c.description.lower()]

    def statistics(self) -> dict:
        percentages = [c.rate_percentage for c in self.find_active()]
        if not percentages:
            return {"count": 0, "average_rate": 0.0, "max_rate": 0.0, "min_rate": 0.0}
        return {
            "count": len(percentages),
            "average_rate": round_money(sum_money(percentages) / len(percentages)),
            "max_rate": max(percentages),
            "min_rate": min(percentages),
        }


@brewery.repository(part_of=AppliedTax)
class AppliedTaxRepository:
    def find_for_basket(self, basket_id) -> list[AppliedTax]:
        return self._dao.query.limit(QUERY_LIMIT).filter(basket_id=str(basket_id)).all().items

    def total_for_basket(self, basket_id) -> float:
        return sum_money(t.tax_amount for t in self.find_for_basket(basket_id))

    def find_all(self) -> list[AppliedTax]:
        return self._dao.query.limit(QUERY_LIMIT).all().items
