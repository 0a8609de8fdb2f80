"""Jurisdiction names and tax-rate validation."""

from brewery.shared.money import percentage_to_rate, rate_to_percentage

MIN_PERCENTAGE = 0.0
MAX_PERCENTAGE = 100.0

JURISDICTION_DESCRIPTIONS = {
    "VA": "Virginia Sales Tax",
    "NC": "North Carolina Sales Tax",
    "SC": "South Carolina Sales Tax",
    "CA": "California Sales Tax",
    "NY": "New York Sales Tax",
    "TX": "Texas Sales Tax",
    "FL": "Florida Sales Tax",
}


def normalize_jurisdiction(state):
    return state.strip().upper() if state else state


def tax_type_description(state):
    state = normalize_jurisdiction(state)
    return JURISDICTION_DESCRIPTIONS.get(state, f"{state} Sales Tax")


def is_valid_tax_rate(percentage) -> bool:
    return percentage is not None and MIN_PERCENTAGE <= percentage <= MAX_PERCENTAGE


__all__ = [
    "JURISDICTION_DESCRIPTIONS",
    "is_valid_tax_rate",
    "normalize_jurisdiction",
    "percentage_to_rate",
    "rate_to_percentage",
    "tax_type_description",
]
