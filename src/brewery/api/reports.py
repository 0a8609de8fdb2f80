"""FastAPI endpoints for read-only reports."""

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from brewery.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD
from brewery.reports.dashboard import dashboard
from brewery.reports.inventory import low_stock_report, stock_report
from brewery.reports.sales import (
    Period,
    as_dicts,
    export_sales_csv,
    product_sales_report,
    purchase_report,
    revenue_report,
    sales_statistics,
    top_customers,
)
from brewery.reports.tax import tax_report

report_router = APIRouter(prefix="/api/reports", tags=["reports"])


@report_router.get("/stock")
async def stock() -> list[dict]:
    return as_dicts(stock_report())


@report_router.get("/low-stock")
async def low_stock(threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> list[dict]:
    return as_dicts(low_stock_report(threshold))


@report_router.get("/purchases")
async def purchases(
    shopper_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    return as_dicts(purchase_report(shopper_id, start, end))


@report_router.get("/top-customers")
async def customers(limit: int = 10) -> list[dict]:
    return as_dicts(top_customers(limit))


@report_router.get("/product-sales")
async def product_sales(start: datetime | None = None, end: datetime | None = None) -> list[dict]:
    return as_dicts(product_sales_report(start, end))


@report_router.get("/revenue")
async def revenue(
    period: Period = Period.MONTHLY,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    return as_dicts(revenue_report(period, start, end))


@report_router.get("/tax")
async def tax() -> list[dict]:
    return as_dicts(tax_report())


@report_router.get("/dashboard")
async def dashboard_kpis() -> dict:
    return asdict(dashboard())


@report_router.get("/sales-statistics")
async def statistics(start: datetime, end: datetime) -> dict:
    return asdict(sales_statistics(start, end))


@report_router.get("/sales.csv", response_class=PlainTextResponse)
async def sales_csv(start: datetime | None = None, end: datetime | None = None) -> str:
    return export_sales_csv(start, end)
