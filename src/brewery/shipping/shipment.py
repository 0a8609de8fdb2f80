"""Shipment aggregate: a basket's journey from warehouse to door.

Statuses are numeric codes, 1 (Pending) to 6 (Cancelled).
"""

from datetime import UTC, datetime
from enum import IntEnum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from brewery.domain import brewery
from brewery.shared.money import round_money
from brewery.shipping.events import ShipmentStatusChanged


class ShipmentStatus(IntEnum):
    PENDING = 1
    PROCESSING = 2
    SHIPPED = 3
    IN_TRANSIT = 4
    DELIVERED = 5
    CANCELLED = 6

    @property
    def label(self):
        return self.name.replace("_", " ").title()


ACTIVE_SHIPMENT_STATUSES = frozenset(s for s in ShipmentStatus if s is not ShipmentStatus.CANCELLED)

DELIVERY_DAYS = {
    "standard": 7,
    "express": 3,
    "overnight": 1,
    "priority": 2,
}
DEFAULT_DELIVERY_DAYS = 5
UNSPECIFIED_DELIVERY_DAYS = 7


@brewery.aggregate
class Shipment:
    basket_id = Identifier()
    method = String(max_length=20)
    ship_cost = Float(min_value=0.0)
    tracking_number = String(max_length=50)
    status = Integer(default=ShipmentStatus.PENDING.value, min_value=1, max_value=6)
    expected_ship_date = DateTime()
    actual_ship_date = DateTime()
    created_at = DateTime()

    @classmethod
    def open(cls, basket_id=None, method=None, ship_cost=None, tracking_number=None, expected_ship_date=None):
        return cls(
            basket_id=basket_id,
            method=method.strip().lower() if method else None,
            ship_cost=round_money(ship_cost) if ship_cost is not None else None,
            tracking_number=tracking_number,
            status=ShipmentStatus.PENDING.value,
            expected_ship_date=expected_ship_date,
            created_at=datetime.now(UTC),
        )

    @property
    def status_label(self):
        return ShipmentStatus(self.status).label

    @property
    def is_shipped(self):
        return self.status >= ShipmentStatus.SHIPPED

    @property
    def is_delivered(self):
        return self.status == ShipmentStatus.DELIVERED

    @property
    def estimated_delivery_days(self):
        if not self.method:
            return UNSPECIFIED_DELIVERY_DAYS
        return DELIVERY_DAYS.get(self.method.lower(), DEFAULT_DELIVERY_DAYS)

    def update_status(self, code):
        try:
            new_status = ShipmentStatus(code)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown shipment status {code}"]}) from exc

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status.value
        if new_status is ShipmentStatus.SHIPPED:
            self.actual_ship_date = now

        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                previous_status=previous,
                new_status=new_status.value,
                changed_at=now,
            )
        )

    def mark_as_shipped(self):
        self.update_status(ShipmentStatus.SHIPPED)

    def mark_as_delivered(self):
        self.update_status(ShipmentStatus.DELIVERED)
