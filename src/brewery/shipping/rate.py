"""ShippingRate aggregate: the fee charged for a weight band."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String

from brewery.domain import brewery
from brewery.shared.money import round_money
from brewery.shipping.events import ShippingRateDefined


@brewery.aggregate
class ShippingRate:
    low = Float(required=True, min_value=0.0)
    high = Float(required=True, min_value=0.0)
    fee = Float(required=True, min_value=0.0)
    method = String(max_length=20)
    ship_cost = Float(min_value=0.0)
    created_at = DateTime()

    @invariant.post
    def band_must_be_ordered(self):
        if self.low is not None and self.high is not None and self.low >= self.high:
            raise ValidationError({"high": ["Upper weight must be greater than lower weight"]})

    @classmethod
    def define(cls, low, high, fee, method=None, ship_cost=None):
        rate = cls(
            low=low,
            high=high,
            fee=round_money(fee),
            method=method.strip().lower() if method else None,
            ship_cost=round_money(ship_cost) if ship_cost is not None else None,
            created_at=datetime.now(UTC),
        )
        rate._announce()
        return rate

    def _announce(self):
        self.raise_(
            ShippingRateDefined(rate_id=str(self.id), low=self.low, high=self.high, fee=self.fee, method=self.method)
        )

    def covers(self, weight):
        return self.low <= weight <= self.high

    def overlaps(self, low, high):
        """Inclusive on both ends: bands that only touch still overlap."""
        return self.low <= high and low <= self.high

    @property
    def cost(self):
        return self.ship_cost if self.ship_cost is not None else self.fee

    @property
    def width(self):
        return self.high - self.low

    def redefine(self, low, high, fee, method=None, ship_cost=None):
        # Widen first so the band invariant holds after each assignment
        self.low = min(self.low, low)
        self.high = max(self.high, high)
        self.low = low
        self.high = high
        self.fee = round_money(fee)
        self.method = method.strip().lower() if method else None
        self.ship_cost = round_money(ship_cost) if ship_cost is not None else None
        self._announce()
