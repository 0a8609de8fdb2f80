"""Shipping cost resolution.

A weight is priced by the narrowest stored band that covers it, preferring a
band for the requested method. When nothing covers the weight the fixed
method table applies.
"""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from brewery.shared.money import round_money
from brewery.shipping.rate import ShippingRate

STANDARD = "standard"

DEFAULT_COSTS = {
    STANDARD: 8.00,
    "priority": 12.00,
    "express": 15.00,
    "overnight": 25.00,
}


def default_cost(method) -> float:
    key = method.strip().lower() if method else STANDARD
    return DEFAULT_COSTS.get(key, DEFAULT_COSTS[STANDARD])


def _best(rates):
    """Narrowest band wins; ties go to the lower band, then the cheaper one."""
    if not rates:
        return None
    return min(rates, key=lambda r: (r.width, r.low, r.cost, str(r.id)))


def resolve_rate(weight, method=None) -> ShippingRate | None:
    covering = current_domain.repository_for(ShippingRate).find_covering(weight)
    if method:
        wanted = method.strip().lower()
        match = _best([r for r in covering if r.method == wanted])
        if match is not None:
            return match
    return _best(covering)


def calculate_cost(weight, method=None) -> float:
    if weight is None or weight <= 0:
        raise ValidationError({"weight": ["Weight must be greater than zero"]})

    rate = resolve_rate(weight, method)
    if rate is None:
        return default_cost(method)
    return round_money(rate.cost)


def validate_weight_range(low, high, exclude_id=None) -> bool:
    """True when ``[low, high]`` is a well-formed band that no stored band touches."""
    if low is None or high is None or low < 0 or low >= high:
        return False
    overlapping = current_domain.repository_for(ShippingRate).find_overlapping(low, high, exclude_id=exclude_id)
    return not overlapping
