"""Queries over shipping rates and shipments."""

from brewery.domain import brewery
from brewery.shipping.rate import ShippingRate
from brewery.shipping.shipment import ACTIVE_SHIPMENT_STATUSES, Shipment

QUERY_LIMIT = 1000


@brewery.repository(part_of=ShippingRate)
class ShippingRateRepository:
    def find_all(self) -> list[ShippingRate]:
        return self._dao.query.limit(QUERY_LIMIT).all().items

    def find_ordered_by_weight(self) -> list[ShippingRate]:
        return sorted(self.find_all(), key=lambda r: (r.low, r.high))

    def find_ordered_by_fee(self) -> list[ShippingRate]:
        return sorted(self.find_all(), key=lambda r: (r.fee, r.low))

    def find_covering(self, weight) -> list[ShippingRate]:
        return [r for r in self.find_ordered_by_weight() if r.covers(weight)]

    def find_by_method(self, method) -> list[ShippingRate]:
        method = method.strip().lower()
        return [r for r in self.find_ordered_by_weight() if r.method == method]

    def find_by_fee_range(self, minimum, maximum) -> list[ShippingRate]:
        return [r for r in self.find_ordered_by_fee() if minimum <= r.fee <= maximum]

    def available_methods(self) -> list[str]:
        return sorted({r.method for r in self.find_all() if r.method})

    def find_overlapping(self, low, high, exclude_id=None) -> list[ShippingRate]:
        return [
            r for r in self.find_all() if r.overlaps(low, high) and (exclude_id is None or str(r.id) != str(exclude_id))
        ]


@brewery.repository(part_of=Shipment)
class ShipmentRepository:
    def find_by_tracking_number(self, tracking_number) -> Shipment | None:
        matches = self._dao.query.filter(tracking_number=tracking_number).all().items
        return matches[0] if matches else None

    def find_for_basket(self, basket_id) -> list[Shipment]:
        return self._dao.query.limit(QUERY_LIMIT).filter(basket_id=str(basket_id)).all().items

    def find_active(self) -> list[Shipment]:
        return [s for s in self._dao.query.limit(QUERY_LIMIT).all().items if s.status in ACTIVE_SHIPMENT_STATUSES]
