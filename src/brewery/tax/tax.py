"""Tax aggregates.

``TaxConfiguration`` is the rate a jurisdiction charges. ``AppliedTax`` is
the amount charged on one basket, with the rate copied at the time so later
rate changes do not rewrite history.

Rates are stored as decimal fractions (0.0725). The percentage view is
derived from the fraction, never stored alongside it.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String

from brewery.domain import brewery
from brewery.shared.money import multiply_money, round_money, round_rate
from brewery.tax.events import TaxApplied, TaxRateConfigured
from brewery.tax.rates import (
    is_valid_tax_rate,
    normalize_jurisdiction,
    percentage_to_rate,
    rate_to_percentage,
    tax_type_description,
)


def compute_tax(amount, rate):
    """Tax owed on ``amount`` at fractional ``rate``, rounded half-up to cents."""
    return multiply_money(amount, rate)


@brewery.aggregate
class TaxConfiguration:
    state = String(required=True, max_length=2)
    rate = Float(required=True, min_value=0.0, max_value=1.0)
    active = Boolean(default=True)
    description = String(max_length=100)
    province = String(max_length=50)
    created_at = DateTime()

    @invariant.post
    def rate_must_be_a_fraction(self):
        if self.rate is None or not 0.0 <= self.rate <= 1.0:
            raise ValidationError({"rate": ["Tax rate must be between 0% and 100%"]})

    @classmethod
    def configure(cls, state, rate_percentage, description=None, province=None):
        if not is_valid_tax_rate(rate_percentage):
            raise ValidationError({"rate_percentage": ["Tax rate must be between 0% and 100%"]})

        state = normalize_jurisdiction(state)
        config = cls(
            state=state,
            rate=percentage_to_rate(rate_percentage),
            active=True,
            description=description or tax_type_description(state),
            province=province,
            created_at=datetime.now(UTC),
        )
        config._announce()
        return config

    def _announce(self):
        self.raise_(
            TaxRateConfigured(configuration_id=str(self.id), state=self.state, rate=self.rate, active=self.active)
        )

    @property
    def rate_percentage(self):
        return rate_to_percentage(self.rate)

    @property
    def tax_type_description(self):
        return tax_type_description(self.state)

    @property
    def location_description(self):
        return f"{self.state}, {self.province}" if self.province else self.state

    def set_rate_from_percentage(self, percentage):
        if not is_valid_tax_rate(percentage):
            raise ValidationError({"rate_percentage": ["Tax rate must be between 0% and 100%"]})
        self.rate = percentage_to_rate(percentage)
        self._announce()

    def reconfigure(self, percentage, description=None):
        self.set_rate_from_percentage(percentage)
        if description:
            self.description = description
        self.active = True

    def set_active(self, active):
        if self.active != active:
            self.active = active
            self._announce()

    def tax_for(self, amount):
        if amount is None or amount <= 0:
            return 0.0
        return compute_tax(amount, self.rate)


@brewery.aggregate
class AppliedTax:
    basket_id = Identifier(required=True)
    state = String(required=True, max_length=2)
    rate = Float(required=True, min_value=0.0, max_value=1.0)
    tax_amount = Float(required=True, min_value=0.0)
    created_at = DateTime()

    @classmethod
    def charge(cls, basket_id, configuration, subtotal):
        applied = cls(
            basket_id=basket_id,
            state=configuration.state,
            rate=round_rate(configuration.rate),
            tax_amount=round_money(configuration.tax_for(subtotal)),
            created_at=datetime.now(UTC),
        )
        applied.raise_(
            TaxApplied(
                applied_tax_id=str(applied.id),
                basket_id=str(basket_id),
                state=applied.state,
                rate=applied.rate,
                tax_amount=applied.tax_amount,
            )
        )
        return applied

    @property
    def rate_percentage(self):
        return rate_to_percentage(self.rate)
