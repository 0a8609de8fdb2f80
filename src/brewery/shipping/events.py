"""Domain events for shipping rates and shipments."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from brewery.domain import brewery


@brewery.event(part_of="ShippingRate")
class ShippingRateDefined:
    __version__ = 1

    rate_id = Identifier(required=True)
    low = Float(required=True)
    high = Float(required=True)
    fee = Float(required=True)
    method = String()


@brewery.event(part_of="Shipment")
class ShipmentStatusChanged:
    __version__ = 1

    shipment_id = Identifier(required=True)
    previous_status = Integer(required=True)
    new_status = Integer(required=True)
    changed_at = DateTime(required=True)
