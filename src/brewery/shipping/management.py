"""Shipping rate table and shipment tracking: commands and handlers."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from brewery.domain import brewery
from brewery.shipping.rate import ShippingRate
from brewery.shipping.resolver import validate_weight_range
from brewery.shipping.shipment import Shipment

logger = structlog.get_logger(__name__)


@brewery.command(part_of="ShippingRate")
class CreateShippingRate:
    low = Float(required=True, min_value=0.0)
    high = Float(required=True, min_value=0.0)
    fee = Float(required=True, min_value=0.0)
    method = String(max_length=20)
    ship_cost = Float(min_value=0.0)


@brewery.command(part_of="ShippingRate")
class UpdateShippingRate:
    rate_id = Identifier(required=True)
    low = Float(required=True, min_value=0.0)
    high = Float(required=True, min_value=0.0)
    fee = Float(required=True, min_value=0.0)
    method = String(max_length=20)
    ship_cost = Float(min_value=0.0)


@brewery.command(part_of="ShippingRate")
class DeleteShippingRate:
    rate_id = Identifier(required=True)


@brewery.command(part_of="Shipment")
class CreateShipment:
    basket_id = Identifier()
    method = String(max_length=20)
    ship_cost = Float(min_value=0.0)
    tracking_number = String(max_length=50)
    expected_ship_date = DateTime()


@brewery.command(part_of="Shipment")
class UpdateShipmentStatus:
    shipment_id = Identifier(required=True)
    status = Integer(required=True)


@brewery.command(part_of="Shipment")
class MarkShipmentShipped:
    shipment_id = Identifier(required=True)


@brewery.command(part_of="Shipment")
class MarkShipmentDelivered:
    shipment_id = Identifier(required=True)


def _assert_band_is_free(low, high, exclude_id=None):
    if not validate_weight_range(low, high, exclude_id=exclude_id):
        raise ValidationError({"weight_range": [f"Weight range {low}-{high} is invalid or overlaps an existing rate"]})


@brewery.command_handler(part_of=ShippingRate)
class ShippingRateHandler:
    @handle(CreateShippingRate)
    def create_rate(self, command):
        _assert_band_is_free(command.low, command.high)
        rate = ShippingRate.define(
            low=command.low,
            high=command.high,
            fee=command.fee,
            method=command.method,
            ship_cost=command.ship_cost,
        )
        current_domain.repository_for(ShippingRate).add(rate)
        logger.info("Shipping rate created", rate_id=str(rate.id), low=rate.low, high=rate.high)
        return str(rate.id)

    @handle(UpdateShippingRate)
    def update_rate(self, command):
        repo = current_domain.repository_for(ShippingRate)
        rate = repo.get(command.rate_id)
        _assert_band_is_free(command.low, command.high, exclude_id=command.rate_id)
        rate.redefine(
            low=command.low,
            high=command.high,
            fee=command.fee,
            method=command.method,
            ship_cost=command.ship_cost,
        )
        repo.add(rate)

    @handle(DeleteShippingRate)
    def delete_rate(self, command):
        repo = current_domain.repository_for(ShippingRate)
        repo._dao.delete(repo.get(command.rate_id))


@brewery.command_handler(part_of=Shipment)
class ShipmentHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        shipment = Shipment.open(
            basket_id=command.basket_id,
            method=command.method,
            ship_cost=command.ship_cost,
            tracking_number=command.tracking_number,
            expected_ship_date=command.expected_ship_date,
        )
        current_domain.repository_for(Shipment).add(shipment)
        return str(shipment.id)

    @handle(UpdateShipmentStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.update_status(command.status)
        repo.add(shipment)
        return shipment.status

    @handle(MarkShipmentShipped)
    def mark_shipped(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.mark_as_shipped()
        repo.add(shipment)

    @handle(MarkShipmentDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.mark_as_delivered()
        repo.add(shipment)
