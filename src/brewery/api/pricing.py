"""FastAPI endpoints for tax configuration and shipping."""

from fastapi import APIRouter, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from brewery.api.schemas import (
    AppliedTaxResponse,
    ApplyTaxRequest,
    BasketTaxResponse,
    CreateShipmentRequest,
    ShipmentIdResponse,
    ShipmentResponse,
    ShipmentStatusRequest,
    ShippingCostResponse,
    ShippingRateRequest,
    ShippingRateResponse,
    StatusResponse,
    TaxCalculationResponse,
    TaxConfigurationRequest,
    TaxConfigurationResponse,
    TaxRateResponse,
    TaxToggleRequest,
    WeightRangeResponse,
)
from brewery.shipping.management import (
    CreateShipment,
    CreateShippingRate,
    DeleteShippingRate,
    MarkShipmentDelivered,
    MarkShipmentShipped,
    UpdateShipmentStatus,
    UpdateShippingRate,
)
from brewery.shipping.rate import ShippingRate
from brewery.shipping.resolver import calculate_cost, validate_weight_range
from brewery.shipping.shipment import Shipment
from brewery.tax.calculator import calculate_tax, calculate_total_with_tax, tax_rate_for_state
from brewery.tax.configuration import (
    ApplyTaxToBasket,
    ConfigureTaxRate,
    DeleteTaxConfiguration,
    RemoveAppliedTaxes,
    ToggleTaxConfiguration,
)
from brewery.tax.rates import normalize_jurisdiction
from brewery.tax.tax import AppliedTax, TaxConfiguration

tax_router = APIRouter(prefix="/api/tax", tags=["tax"])
shipping_router = APIRouter(prefix="/api/shipping", tags=["shipping"])


def _configuration_response(config) -> TaxConfigurationResponse:
    return TaxConfigurationResponse(
        configuration_id=str(config.id),
        state=config.state,
        rate=config.rate,
        rate_percentage=config.rate_percentage,
        active=config.active,
        description=config.description,
        tax_type=config.tax_type_description,
        location=config.location_description,
    )


def _rate_response(rate) -> ShippingRateResponse:
    return ShippingRateResponse(
        rate_id=str(rate.id),
        low=rate.low,
        high=rate.high,
        fee=rate.fee,
        method=rate.method,
        ship_cost=rate.ship_cost,
    )


def _shipment_response(shipment) -> ShipmentResponse:
    return ShipmentResponse(
        shipment_id=str(shipment.id),
        basket_id=str(shipment.basket_id) if shipment.basket_id else None,
        method=shipment.method,
        ship_cost=shipment.ship_cost,
        tracking_number=shipment.tracking_number,
        status=shipment.status,
        status_label=shipment.status_label,
        shipped=shipment.is_shipped,
        delivered=shipment.is_delivered,
        estimated_delivery_days=shipment.estimated_delivery_days,
        expected_ship_date=shipment.expected_ship_date,
        actual_ship_date=shipment.actual_ship_date,
    )


# --- Tax endpoints ---


@tax_router.get("/configurations", response_model=list[TaxConfigurationResponse])
async def list_tax_configurations() -> list[TaxConfigurationResponse]:
    return [_configuration_response(c) for c in current_domain.repository_for(TaxConfiguration).find_active()]


@tax_router.post("/configurations", status_code=201, response_model=TaxConfigurationResponse)
async def configure_tax_rate(body: TaxConfigurationRequest) -> TaxConfigurationResponse:
    command = ConfigureTaxRate(
        state=body.state,
        rate_percentage=body.rate_percentage,
        description=body.description,
        province=body.province,
    )
    config_id = current_domain.process(command, asynchronous=False)
    return _configuration_response(current_domain.repository_for(TaxConfiguration).get(config_id))


@tax_router.put("/configurations/{configuration_id}/active", response_model=StatusResponse)
async def toggle_tax_configuration(configuration_id: str, body: TaxToggleRequest) -> StatusResponse:
    command = ToggleTaxConfiguration(configuration_id=configuration_id, active=body.active)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@tax_router.delete("/configurations/{configuration_id}", status_code=204)
async def delete_tax_configuration(configuration_id: str) -> Response:
    current_domain.process(DeleteTaxConfiguration(configuration_id=configuration_id), asynchronous=False)
    return Response(status_code=204)


@tax_router.get("/calculate", response_model=TaxCalculationResponse)
async def calculate(amount: float, state: str) -> TaxCalculationResponse:
    tax = calculate_tax(amount, state)
    return TaxCalculationResponse(
        state=normalize_jurisdiction(state),
        amount=amount,
        tax=tax,
        total=calculate_total_with_tax(amount, state),
    )


@tax_router.get("/rates/{state}", response_model=TaxRateResponse)
async def rate_for_state(state: str) -> TaxRateResponse:
    return TaxRateResponse(state=normalize_jurisdiction(state), rate_percentage=tax_rate_for_state(state))


@tax_router.get("/statistics")
async def tax_statistics() -> dict:
    return current_domain.repository_for(TaxConfiguration).statistics()


@tax_router.post("/baskets/{basket_id}", status_code=201, response_model=BasketTaxResponse)
async def apply_tax(basket_id: str, body: ApplyTaxRequest) -> BasketTaxResponse:
    command = ApplyTaxToBasket(basket_id=basket_id, state=body.state, subtotal=body.subtotal)
    current_domain.process(command, asynchronous=False)
    return await basket_taxes(basket_id)


@tax_router.get("/baskets/{basket_id}", response_model=BasketTaxResponse)
async def basket_taxes(basket_id: str) -> BasketTaxResponse:
    repo = current_domain.repository_for(AppliedTax)
    return BasketTaxResponse(
        basket_id=basket_id,
        total_tax=repo.total_for_basket(basket_id),
        taxes=[
            AppliedTaxResponse(
                applied_tax_id=str(t.id),
                state=t.state,
                rate_percentage=t.rate_percentage,
                tax_amount=t.tax_amount,
            )
            for t in repo.find_for_basket(basket_id)
        ],
    )


@tax_router.delete("/baskets/{basket_id}", response_model=StatusResponse)
async def remove_basket_taxes(basket_id: str) -> StatusResponse:
    current_domain.process(RemoveAppliedTaxes(basket_id=basket_id), asynchronous=False)
    return StatusResponse()


# --- Shipping endpoints ---


@shipping_router.get("/rates", response_model=list[ShippingRateResponse])
async def list_rates(order_by: str = "weight") -> list[ShippingRateResponse]:
    repo = current_domain.repository_for(ShippingRate)
    rates = repo.find_ordered_by_fee() if order_by == "fee" else repo.find_ordered_by_weight()
    return [_rate_response(r) for r in rates]


@shipping_router.post("/rates", status_code=201, response_model=ShippingRateResponse)
async def create_rate(body: ShippingRateRequest) -> ShippingRateResponse:
    rate_id = current_domain.process(CreateShippingRate(**body.model_dump()), asynchronous=False)
    return _rate_response(current_domain.repository_for(ShippingRate).get(rate_id))


@shipping_router.put("/rates/{rate_id}", response_model=ShippingRateResponse)
async def update_rate(rate_id: str, body: ShippingRateRequest) -> ShippingRateResponse:
    current_domain.process(UpdateShippingRate(rate_id=rate_id, **body.model_dump()), asynchronous=False)
    return _rate_response(current_domain.repository_for(ShippingRate).get(rate_id))


@shipping_router.delete("/rates/{rate_id}", status_code=204)
async def delete_rate(rate_id: str) -> Response:
    current_domain.process(DeleteShippingRate(rate_id=rate_id), asynchronous=False)
    return Response(status_code=204)


@shipping_router.get("/cost", response_model=ShippingCostResponse)
async def shipping_cost(weight: float, method: str | None = None) -> ShippingCostResponse:
    return ShippingCostResponse(weight=weight, method=method, cost=calculate_cost(weight, method))


@shipping_router.get("/methods", response_model=list[str])
async def available_methods() -> list[str]:
    return current_domain.repository_for(ShippingRate).available_methods()


@shipping_router.get("/validate-range", response_model=WeightRangeResponse)
async def validate_range(low: float, high: float, exclude_id: str | None = None) -> WeightRangeResponse:
    return WeightRangeResponse(low=low, high=high, valid=validate_weight_range(low, high, exclude_id))


@shipping_router.post("/shipments", status_code=201, response_model=ShipmentIdResponse)
async def create_shipment(body: CreateShipmentRequest) -> ShipmentIdResponse:
    shipment_id = current_domain.process(CreateShipment(**body.model_dump()), asynchronous=False)
    return ShipmentIdResponse(shipment_id=shipment_id)


@shipping_router.get("/shipments", response_model=list[ShipmentResponse])
async def active_shipments() -> list[ShipmentResponse]:
    return [_shipment_response(s) for s in current_domain.repository_for(Shipment).find_active()]


@shipping_router.get("/shipments/tracking/{tracking_number}", response_model=ShipmentResponse)
async def shipment_by_tracking_number(tracking_number: str) -> ShipmentResponse:
    shipment = current_domain.repository_for(Shipment).find_by_tracking_number(tracking_number)
    if shipment is None:
        raise ObjectNotFoundError(f"No shipment with tracking number {tracking_number}")
    return _shipment_response(shipment)


@shipping_router.get("/shipments/{shipment_id}", response_model=ShipmentResponse)
async def get_shipment(shipment_id: str) -> ShipmentResponse:
    return _shipment_response(current_domain.repository_for(Shipment).get(shipment_id))


@shipping_router.put("/shipments/{shipment_id}/status", response_model=ShipmentResponse)
async def update_shipment_status(shipment_id: str, body: ShipmentStatusRequest) -> ShipmentResponse:
    current_domain.process(UpdateShipmentStatus(shipment_id=shipment_id, status=body.status), asynchronous=False)
    return await get_shipment(shipment_id)


@shipping_router.post("/shipments/{shipment_id}/ship", response_model=ShipmentResponse)
async def ship(shipment_id: str) -> ShipmentResponse:
    current_domain.process(MarkShipmentShipped(shipment_id=shipment_id), asynchronous=False)
    return await get_shipment(shipment_id)


@shipping_router.post("/shipments/{shipment_id}/deliver", response_model=ShipmentResponse)
async def deliver(shipment_id: str) -> ShipmentResponse:
    current_domain.process(MarkShipmentDelivered(shipment_id=shipment_id), asynchronous=False)
    return await get_shipment(shipment_id)
