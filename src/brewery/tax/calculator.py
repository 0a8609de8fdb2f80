"""Tax calculation for a jurisdiction.

Unknown or inactive jurisdictions charge nothing; so do non-positive amounts.
"""

from protean.utils.globals import current_domain

from brewery.shared.money import round_money, to_decimal
from brewery.tax.tax import TaxConfiguration


def active_configuration(state):
    if not state:
        return None
    return current_domain.repository_for(TaxConfiguration).find_active_for_state(state)


def calculate_tax(amount, state) -> float:
    if amount is None or amount <= 0:
        return 0.0
    config = active_configuration(state)
    if config is None:
        return 0.0
    return config.tax_for(amount)


def calculate_total_with_tax(amount, state) -> float:
    return round_money(to_decimal(amount) + to_decimal(calculate_tax(amount, state)))


def tax_rate_for_state(state) -> float:
    """Active rate for ``state`` as a percentage, 0 when nothing is configured."""
    config = active_configuration(state)
    return config.rate_percentage if config else 0.0
