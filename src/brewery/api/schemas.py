"""Pydantic request/response schemas for the storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"


# --- Shoppers ---


class RegisterShopperRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Dana",
                    "last_name": "Hops",
                    "email": "dana@example.com",
                    "city": "Richmond",
                    "state": "VA",
                    "zip_code": "23219",
                    "country": "USA",
                }
            ]
        }
    }

    first_name: str = Field(..., max_length=50)
    last_name: str = Field(..., max_length=50)
    email: str = Field(..., max_length=100)
    phone: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=50)
    state: str | None = Field(None, max_length=2)
    zip_code: str | None = Field(None, max_length=15)
    province: str | None = Field(None, max_length=50)
    country: str | None = Field(None, max_length=50)
    cookie: bool = False


class UpdateShopperRequest(BaseModel):
    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=50)
    state: str | None = Field(None, max_length=2)
    zip_code: str | None = Field(None, max_length=15)
    province: str | None = Field(None, max_length=50)
    country: str | None = Field(None, max_length=50)
    cookie: bool | None = None


class ShopperIdResponse(BaseModel):
    shopper_id: str


class ShopperResponse(BaseModel):
    shopper_id: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    province: str | None = None
    country: str | None = None
    created_at: datetime | None = None
    last_visit_at: datetime | None = None


class TotalPurchasesResponse(BaseModel):
    shopper_id: str
    total: float


# --- Products ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Pale Ale Kit",
                    "price": 34.95,
                    "description": "Everything for five gallons of pale ale",
                    "stock": 20,
                    "category": "Kits",
                    "type": "E",
                }
            ]
        }
    }

    name: str = Field(..., max_length=25)
    price: float = Field(..., gt=0)
    description: str | None = Field(None, max_length=100)
    stock: int = Field(0, ge=0)
    category: str | None = Field(None, max_length=20)
    type: str | None = Field(None, max_length=1)
    image_url: str | None = Field(None, max_length=255)


class UpdateProductRequest(BaseModel):
    name: str = Field(..., max_length=25)
    price: float = Field(..., gt=0)
    description: str | None = Field(None, max_length=100)
    stock: int = Field(..., ge=0)
    active: bool = True
    category: str | None = Field(None, max_length=20)
    type: str | None = Field(None, max_length=1)
    image_url: str | None = Field(None, max_length=255)


class PatchProductRequest(BaseModel):
    name: str | None = Field(None, max_length=25)
    price: float | None = Field(None, gt=0)
    description: str | None = Field(None, max_length=100)
    stock: int | None = Field(None, ge=0)
    active: bool | None = None
    category: str | None = Field(None, max_length=20)
    type: str | None = Field(None, max_length=1)
    image_url: str | None = Field(None, max_length=255)


class UpdateDescriptionRequest(BaseModel):
    description: str = Field(..., max_length=100)


class BulkStatusRequest(BaseModel):
    product_ids: list[str]
    active: bool


class BulkStatusResponse(BaseModel):
    updated: int


class StockRequest(BaseModel):
    stock: int = Field(..., ge=0)


class StockQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class StockChangeResponse(BaseModel):
    success: bool
    stock: int


class StockAvailabilityResponse(BaseModel):
    product_id: str
    quantity: int
    available: bool


class SaleRequest(BaseModel):
    sale_price: float = Field(..., gt=0)
    sale_start: datetime
    sale_end: datetime


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    price: float
    current_price: float
    stock: int
    active: bool
    on_sale: bool
    sale_price: float | None = None
    sale_start: datetime | None = None
    sale_end: datetime | None = None
    category: str | None = None
    type: str | None = None
    image_url: str | None = None


class ProductStatisticsResponse(BaseModel):
    active_products: int
    total_stock: int
    average_price: float
    total_stock_value: float
    by_category: dict[str, int]


# --- Baskets ---


class CreateBasketRequest(BaseModel):
    shopper_id: str


class BasketIdResponse(BaseModel):
    basket_id: str


class AddItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    option1: int | None = None
    option2: int | None = None


class UpdateItemQuantityRequest(BaseModel):
    quantity: int


class BasketStatusRequest(BaseModel):
    status: str


class TaxAmountRequest(BaseModel):
    tax: float = Field(..., ge=0)


class ShippingAmountRequest(BaseModel):
    shipping: float = Field(..., ge=0)


class ShippingAddressRequest(BaseModel):
    ship_address: str | None = Field(None, max_length=100)
    ship_city: str | None = Field(None, max_length=50)
    ship_state: str | None = Field(None, max_length=2)
    ship_zipcode: str | None = Field(None, max_length=15)
    ship_country: str | None = Field(None, max_length=50)


class ShippingQuoteRequest(BaseModel):
    weight: float = Field(..., gt=0)
    method: str | None = None


class BasketItemResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    price: float
    subtotal: float
    option1: int | None = None
    option2: int | None = None


class BasketResponse(BaseModel):
    basket_id: str
    shopper_id: str
    status: str
    status_code: int
    quantity: int
    subtotal: float
    tax: float
    shipping: float
    total: float
    created_at: datetime | None = None
    ordered_at: datetime | None = None
    shipping_address: str | None = None
    items: list[BasketItemResponse] = []


class BasketStatusResponse(BaseModel):
    basket_id: str
    status: str


# --- Tax ---


class TaxConfigurationRequest(BaseModel):
    state: str = Field(..., min_length=2, max_length=2)
    rate_percentage: float = Field(..., ge=0, le=100)
    description: str | None = Field(None, max_length=100)
    province: str | None = Field(None, max_length=50)


class TaxToggleRequest(BaseModel):
    active: bool


class TaxConfigurationResponse(BaseModel):
    configuration_id: str
    state: str
    rate: float
    rate_percentage: float
    active: bool
    description: str | None = None
    tax_type: str
    location: str


class TaxCalculationResponse(BaseModel):
    state: str
    amount: float
    tax: float
    total: float


class TaxRateResponse(BaseModel):
    state: str
    rate_percentage: float


class ApplyTaxRequest(BaseModel):
    state: str = Field(..., min_length=2, max_length=2)
    subtotal: float | None = Field(default=None, ge=0)


class AppliedTaxResponse(BaseModel):
    applied_tax_id: str
    state: str
    rate_percentage: float
    tax_amount: float


class BasketTaxResponse(BaseModel):
    basket_id: str
    total_tax: float
    taxes: list[AppliedTaxResponse]


# --- Shipping ---


class ShippingRateRequest(BaseModel):
    low: float = Field(..., ge=0)
    high: float = Field(..., gt=0)
    fee: float = Field(..., ge=0)
    method: str | None = Field(None, max_length=20)
    ship_cost: float | None = Field(None, ge=0)


class ShippingRateResponse(BaseModel):
    rate_id: str
    low: float
    high: float
    fee: float
    method: str | None = None
    ship_cost: float | None = None


class ShippingCostResponse(BaseModel):
    weight: float
    method: str | None = None
    cost: float


class WeightRangeResponse(BaseModel):
    low: float
    high: float
    valid: bool


class CreateShipmentRequest(BaseModel):
    basket_id: str | None = None
    method: str | None = Field(None, max_length=20)
    ship_cost: float | None = Field(None, ge=0)
    tracking_number: str | None = Field(None, max_length=50)
    expected_ship_date: datetime | None = None


class ShipmentStatusRequest(BaseModel):
    status: int = Field(..., ge=1, le=6)


class ShipmentIdResponse(BaseModel):
    shipment_id: str


class ShipmentResponse(BaseModel):
    shipment_id: str
    basket_id: str | None = None
    method: str | None = None
    ship_cost: float | None = None
    tracking_number: str | None = None
    status: int
    status_label: str
    shipped: bool
    delivered: bool
    estimated_delivery_days: int
    expected_ship_date: datetime | None = None
    actual_ship_date: datetime | None = None
