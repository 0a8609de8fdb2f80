"""FastAPI endpoints for shoppers, the product catalogue and baskets."""

import json

from fastapi import APIRouter, Response
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from brewery.api.schemas import (
    AddItemRequest,
    BasketIdResponse,
    BasketItemResponse,
    BasketResponse,
    BasketStatusRequest,
    BasketStatusResponse,
    BulkStatusRequest,
    BulkStatusResponse,
    CreateBasketRequest,
    CreateProductRequest,
    PatchProductRequest,
    ProductIdResponse,
    ProductResponse,
    ProductStatisticsResponse,
    RegisterShopperRequest,
    SaleRequest,
    ShippingAddressRequest,
    ShippingAmountRequest,
    ShippingQuoteRequest,
    ShopperIdResponse,
    ShopperResponse,
    StatusResponse,
    StockAvailabilityResponse,
    StockChangeResponse,
    StockQuantityRequest,
    StockRequest,
    TaxAmountRequest,
    TotalPurchasesResponse,
    UpdateDescriptionRequest,
    UpdateItemQuantityRequest,
    UpdateProductRequest,
    UpdateShopperRequest,
)
from brewery.basket.basket import Basket
from brewery.basket.checkout import CancelBasket, CheckoutBasket, FinalizeBasket, UpdateBasketStatus
from brewery.basket.items import AddItemToBasket, RemoveBasketItem, UpdateBasketItemQuantity
from brewery.basket.management import (
    ClearBasket,
    CreateBasket,
    SetBasketShippingAddress,
    UpdateBasketShipping,
    UpdateBasketTax,
)
from brewery.basket.status import BasketStatus
from brewery.catalogue.management import (
    CreateProduct,
    DeleteProduct,
    EndProductSale,
    PutProductOnSale,
    ToggleProductStatus,
    UpdateProduct,
    UpdateProductDescription,
    UpdateProductPartial,
    UpdateProductsStatus,
)
from brewery.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from brewery.catalogue.stock import IncreaseStock, UpdateStock, decrease_stock, is_stock_available
from brewery.procedures.gateway import ProcedureGateway
from brewery.shipping.resolver import calculate_cost
from brewery.shopper.registration import RecordShopperVisit, RegisterShopper, UpdateShopperProfile
from brewery.shopper.shopper import Shopper

shopper_router = APIRouter(prefix="/api/shoppers", tags=["shoppers"])
product_router = APIRouter(prefix="/api/products", tags=["products"])
basket_router = APIRouter(prefix="/api/baskets", tags=["baskets"])

procedures = ProcedureGateway()


def _shopper_response(shopper) -> ShopperResponse:
    return ShopperResponse(
        shopper_id=str(shopper.id),
        first_name=shopper.first_name,
        last_name=shopper.last_name,
        full_name=shopper.full_name,
        email=shopper.email,
        phone=shopper.phone,
        address=shopper.address,
        city=shopper.city,
        state=shopper.state,
        zip_code=shopper.zip_code,
        province=shopper.province,
        country=shopper.country,
        created_at=shopper.created_at,
        last_visit_at=shopper.last_visit_at,
    )


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        current_price=product.current_price(),
        stock=product.stock,
        active=product.active,
        on_sale=product.is_on_sale(),
        sale_price=product.sale_price,
        sale_start=product.sale_start,
        sale_end=product.sale_end,
        category=product.category,
        type=product.product_type,
        image_url=product.image_url,
    )


def _basket_response(basket) -> BasketResponse:
    status = basket.current_status
    return BasketResponse(
        basket_id=str(basket.id),
        shopper_id=str(basket.shopper_id),
        status=status.value,
        status_code=status.code,
        quantity=basket.quantity,
        subtotal=basket.subtotal,
        tax=basket.tax,
        shipping=basket.shipping,
        total=basket.total,
        created_at=basket.created_at,
        ordered_at=basket.ordered_at,
        shipping_address=basket.full_shipping_address or None,
        items=[
            BasketItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
                subtotal=item.subtotal,
                option1=item.option1,
                option2=item.option2,
            )
            for item in basket.items
        ],
    )


# --- Shopper endpoints ---


@shopper_router.post("", status_code=201, response_model=ShopperIdResponse)
async def register_shopper(body: RegisterShopperRequest) -> ShopperIdResponse:
    result = current_domain.process(RegisterShopper(**body.model_dump()), asynchronous=False)
    return ShopperIdResponse(shopper_id=result)


@shopper_router.get("/by-email", response_model=ShopperResponse)
async def get_shopper_by_email(email: str) -> ShopperResponse:
    shopper = current_domain.repository_for(Shopper).find_by_email(email)
    if shopper is None:
        raise ObjectNotFoundError(f"No shopper with email {email}")
    return _shopper_response(shopper)


@shopper_router.get("/{shopper_id}", response_model=ShopperResponse)
async def get_shopper(shopper_id: str) -> ShopperResponse:
    return _shopper_response(current_domain.repository_for(Shopper).get(shopper_id))


@shopper_router.put("/{shopper_id}", response_model=StatusResponse)
async def update_shopper(shopper_id: str, body: UpdateShopperRequest) -> StatusResponse:
    current_domain.process(UpdateShopperProfile(shopper_id=shopper_id, **body.model_dump()), asynchronous=False)
    return StatusResponse()


@shopper_router.post("/{shopper_id}/visits", response_model=StatusResponse)
async def record_visit(shopper_id: str) -> StatusResponse:
    current_domain.process(RecordShopperVisit(shopper_id=shopper_id), asynchronous=False)
    return StatusResponse()


@shopper_router.get("/{shopper_id}/baskets", response_model=list[BasketResponse])
async def shopper_baskets(shopper_id: str) -> list[BasketResponse]:
    return [_basket_response(b) for b in current_domain.repository_for(Basket).find_by_shopper(shopper_id)]


@shopper_router.get("/{shopper_id}/basket", response_model=BasketResponse)
async def shopper_active_basket(shopper_id: str) -> BasketResponse:
    basket = current_domain.repository_for(Basket).find_active_for_shopper(shopper_id)
    if basket is None:
        raise ObjectNotFoundError(f"Shopper {shopper_id} has no active basket")
    return _basket_response(basket)


@shopper_router.get("/{shopper_id}/total-purchases", response_model=TotalPurchasesResponse)
async def shopper_total_purchases(shopper_id: str) -> TotalPurchasesResponse:
    current_domain.repository_for(Shopper).get(shopper_id)
    total = procedures.total_purchases(shopper_id)
    return TotalPurchasesResponse(shopper_id=shopper_id, total=total)


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        price=body.price,
        description=body.description,
        stock=body.stock,
        category=body.category,
        product_type=body.type,
        image_url=body.image_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    category: str | None = None,
    type: str | None = None,
    search: str | None = None,
    include_inactive: bool = False,
) -> list[ProductResponse]:
    repo = current_domain.repository_for(Product)
    if search:
        products = repo.search(search)
    elif category or type:
        products = repo.find_by_category_and_type(category, type)
    else:
        products = repo.find_all() if include_inactive else repo.find_active()
    return [_product_response(p) for p in products]


@product_router.get("/in-stock", response_model=list[ProductResponse])
async def in_stock_products() -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).find_in_stock()]


@product_router.get("/out-of-stock", response_model=list[ProductResponse])
async def out_of_stock_products() -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).find_out_of_stock()]


@product_router.get("/low-stock", response_model=list[ProductResponse])
async def low_stock_products(threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).find_low_stock(threshold)]


@product_router.get("/on-sale", response_model=list[ProductResponse])
async def on_sale_products() -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).find_on_sale()]


@product_router.get("/price-range", response_model=list[ProductResponse])
async def products_in_price_range(min_price: float, max_price: float) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).find_by_price_range(min_price, max_price)
    return [_product_response(p) for p in products]


@product_router.get("/statistics", response_model=ProductStatisticsResponse)
async def product_statistics() -> ProductStatisticsResponse:
    repo = current_domain.repository_for(Product)
    return ProductStatisticsResponse(
        active_products=repo.count_active(),
        total_stock=repo.total_stock(),
        average_price=repo.average_price(),
        total_stock_value=repo.total_stock_value(),
        by_category=repo.count_by_category(),
    )


@product_router.post("/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_status(body: BulkStatusRequest) -> BulkStatusResponse:
    command = UpdateProductsStatus(product_ids=json.dumps(body.product_ids), active=body.active)
    updated = current_domain.process(command, asynchronous=False)
    return BulkStatusResponse(updated=updated)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        stock=body.stock,
        active=body.active,
        category=body.category,
        product_type=body.type,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.patch("/{product_id}", response_model=StatusResponse)
async def patch_product(product_id: str, body: PatchProductRequest) -> StatusResponse:
    command = UpdateProductPartial(
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        stock=body.stock,
        active=body.active,
        category=body.category,
        product_type=body.type,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str) -> Response:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return Response(status_code=204)


@product_router.put("/{product_id}/description", response_model=StatusResponse)
async def update_description(product_id: str, body: UpdateDescriptionRequest) -> StatusResponse:
    current_domain.process(
        UpdateProductDescription(product_id=product_id, description=body.description), asynchronous=False
    )
    return StatusResponse()


@product_router.post("/{product_id}/toggle-status", response_model=ProductResponse)
async def toggle_product_status(product_id: str) -> ProductResponse:
    current_domain.process(ToggleProductStatus(product_id=product_id), asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}/stock", response_model=StockChangeResponse)
async def set_stock(product_id: str, body: StockRequest) -> StockChangeResponse:
    stock = current_domain.process(UpdateStock(product_id=product_id, stock=body.stock), asynchronous=False)
    return StockChangeResponse(success=True, stock=stock)


@product_router.post("/{product_id}/stock/decrease", response_model=StockChangeResponse)
async def decrease_product_stock(product_id: str, body: StockQuantityRequest) -> StockChangeResponse:
    success = decrease_stock(product_id, body.quantity)
    product = current_domain.repository_for(Product).get(product_id)
    return StockChangeResponse(success=success, stock=product.stock)


@product_router.post("/{product_id}/stock/increase", response_model=StockChangeResponse)
async def increase_product_stock(product_id: str, body: StockQuantityRequest) -> StockChangeResponse:
    stock = current_domain.process(IncreaseStock(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StockChangeResponse(success=True, stock=stock)


@product_router.get("/{product_id}/stock/available", response_model=StockAvailabilityResponse)
async def stock_availability(product_id: str, quantity: int = 1) -> StockAvailabilityResponse:
    return StockAvailabilityResponse(
        product_id=product_id,
        quantity=quantity,
        available=is_stock_available(product_id, quantity),
    )


@product_router.post("/{product_id}/sale", response_model=StatusResponse)
async def put_on_sale(product_id: str, body: SaleRequest) -> StatusResponse:
    command = PutProductOnSale(
        product_id=product_id,
        sale_price=body.sale_price,
        sale_start=body.sale_start,
        sale_end=body.sale_end,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}/sale", response_model=StatusResponse)
async def end_sale(product_id: str) -> StatusResponse:
    current_domain.process(EndProductSale(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Basket endpoints ---


@basket_router.post("", status_code=201, response_model=BasketIdResponse)
async def create_basket(body: CreateBasketRequest) -> BasketIdResponse:
    result = current_domain.process(CreateBasket(shopper_id=body.shopper_id), asynchronous=False)
    return BasketIdResponse(basket_id=result)


@basket_router.get("", response_model=list[BasketResponse])
async def list_baskets(status: str | None = None) -> list[BasketResponse]:
    repo = current_domain.repository_for(Basket)
    if not status:
        return [_basket_response(b) for b in repo.find_all()]
    try:
        wanted = BasketStatus.parse(status)
    except ValueError as exc:
        raise ValidationError({"status": [f"Unknown basket status {status}"]}) from exc
    baskets = repo.find_by_status(wanted)
    return [_basket_response(b) for b in baskets]


@basket_router.get("/abandoned", response_model=list[BasketResponse])
async def abandoned_baskets() -> list[BasketResponse]:
    return [_basket_response(b) for b in current_domain.repository_for(Basket).find_abandoned()]


@basket_router.get("/statistics")
async def basket_statistics() -> dict:
    repo = current_domain.repository_for(Basket)
    return {
        "count_by_status": repo.count_by_status(),
        "revenue_by_status": repo.revenue_by_status(),
        "average_value_by_status": repo.average_value_by_status(),
    }


@basket_router.get("/{basket_id}", response_model=BasketResponse)
async def get_basket(basket_id: str) -> BasketResponse:
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.post("/{basket_id}/items", response_model=BasketResponse)
async def add_item(basket_id: str, body: AddItemRequest) -> BasketResponse:
    command = AddItemToBasket(
        basket_id=basket_id,
        product_id=body.product_id,
        quantity=body.quantity,
        option1=body.option1,
        option2=body.option2,
    )
    current_domain.process(command, asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.put("/{basket_id}/items/{product_id}", response_model=BasketResponse)
async def update_item_quantity(basket_id: str, product_id: str, body: UpdateItemQuantityRequest) -> BasketResponse:
    command = UpdateBasketItemQuantity(basket_id=basket_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.delete("/{basket_id}/items/{product_id}", response_model=BasketResponse)
async def remove_item(basket_id: str, product_id: str) -> BasketResponse:
    current_domain.process(RemoveBasketItem(basket_id=basket_id, product_id=product_id), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.delete("/{basket_id}/items", response_model=BasketResponse)
async def clear_basket(basket_id: str) -> BasketResponse:
    current_domain.process(ClearBasket(basket_id=basket_id), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.post("/{basket_id}/checkout", response_model=BasketResponse)
async def checkout(basket_id: str) -> BasketResponse:
    current_domain.process(CheckoutBasket(basket_id=basket_id), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.post("/{basket_id}/finalize", response_model=BasketStatusResponse)
async def finalize(basket_id: str) -> BasketStatusResponse:
    status = current_domain.process(FinalizeBasket(basket_id=basket_id), asynchronous=False)
    return BasketStatusResponse(basket_id=basket_id, status=status)


@basket_router.post("/{basket_id}/cancel", response_model=BasketStatusResponse)
async def cancel(basket_id: str) -> BasketStatusResponse:
    status = current_domain.process(CancelBasket(basket_id=basket_id), asynchronous=False)
    return BasketStatusResponse(basket_id=basket_id, status=status)


@basket_router.put("/{basket_id}/status", response_model=BasketStatusResponse)
async def update_status(basket_id: str, body: BasketStatusRequest) -> BasketStatusResponse:
    command = UpdateBasketStatus(basket_id=basket_id, status=body.status.upper())
    status = current_domain.process(command, asynchronous=False)
    return BasketStatusResponse(basket_id=basket_id, status=status)


@basket_router.put("/{basket_id}/tax", response_model=BasketResponse)
async def update_tax(basket_id: str, body: TaxAmountRequest) -> BasketResponse:
    current_domain.process(UpdateBasketTax(basket_id=basket_id, tax=body.tax), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.put("/{basket_id}/shipping", response_model=BasketResponse)
async def update_shipping(basket_id: str, body: ShippingAmountRequest) -> BasketResponse:
    current_domain.process(UpdateBasketShipping(basket_id=basket_id, shipping=body.shipping), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.post("/{basket_id}/shipping/quote", response_model=BasketResponse)
async def quote_shipping(basket_id: str, body: ShippingQuoteRequest) -> BasketResponse:
    """Price the shipment by weight and method, then charge it to the basket."""
    cost = calculate_cost(body.weight, body.method)
    current_domain.process(UpdateBasketShipping(basket_id=basket_id, shipping=cost), asynchronous=False)
    return _basket_response(current_domain.repository_for(Basket).get(basket_id))


@basket_router.put("/{basket_id}/shipping-address", response_model=StatusResponse)
async def set_shipping_address(basket_id: str, body: ShippingAddressRequest) -> StatusResponse:
    current_domain.process(SetBasketShippingAddress(basket_id=basket_id, **body.model_dump()), asynchronous=False)
    return StatusResponse()
