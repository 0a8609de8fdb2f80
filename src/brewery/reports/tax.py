"""Tax collected, grouped by jurisdiction."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from brewery.shared.money import rate_to_percentage, round_rate, sum_money
from brewery.tax.tax import AppliedTax


@dataclass(frozen=True)
class TaxCollected:
    state: str
    records: int
    total_collected: float
    average_rate_percentage: float


def tax_report() -> list[TaxCollected]:
    grouped: dict[str, list[AppliedTax]] = {}
    for applied in current_domain.repository_for(AppliedTax).find_all():
        grouped.setdefault(applied.state, []).append(applied)

    return [
        TaxCollected(
            state=state,
            records=len(rows),
            total_collected=sum_money(r.tax_amount for r in rows),
            average_rate_percentage=rate_to_percentage(round_rate(sum(r.rate for r in rows) / len(rows))),
        )
        for state, rows in sorted(grouped.items())
    ]
