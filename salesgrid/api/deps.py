"""
API dependencies - request-scoped services built from the app-wide caches
"""
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Query, Request

from salesgrid.core import settings as app_settings, Settings, AppCaches
from salesgrid.integrations import GoogleSheetsClient, MercadoLibreClient, MercadoPagoClient
from salesgrid.schemas.report import OrdersQuery
from salesgrid.services.report_service import ReportService


def get_app_settings() -> Settings:
    return app_settings


def get_caches(request: Request) -> AppCaches:
    return request.app.state.caches


def get_report_service(
    settings: Settings = Depends(get_app_settings),
    caches: AppCaches = Depends(get_caches),
) -> ReportService:
    timeout = settings.HTTP_TIMEOUT_SECONDS
    return ReportService(
        settings=settings,
        caches=caches,
        ml_client=MercadoLibreClient(base_url=settings.ML_API_URL, timeout=timeout),
        mp_client=MercadoPagoClient(
            access_token=settings.MP_ACCESS_TOKEN,
            base_url=settings.MP_API_URL,
            timeout=timeout,
        ),
        sheets_client=GoogleSheetsClient(
            spreadsheet_id=settings.GS_SHEET_ID,
            api_key=settings.GS_API_KEY,
            access_token=settings.GS_ACCESS_TOKEN,
            base_url=settings.GS_API_URL,
            timeout=timeout,
        ),
    )


def get_orders_query(
    date_from: Optional[date] = Query(None, alias="from", description="YYYY-MM-DD (local), default today"),
    date_to: Optional[date] = Query(None, alias="to", description="YYYY-MM-DD (local), default today"),
    page_size: int = Query(50, alias="pageSize", ge=1, le=50),
    max_pages: int = Query(20, alias="maxPages", ge=1, le=200),
    include_shipment: bool = Query(True, alias="includeShipment"),
    date_mode: Optional[str] = Query(None, alias="dateMode", pattern="^(created|paid|both)$"),
    settings: Settings = Depends(get_app_settings),
) -> OrdersQuery:
    today = datetime.now(ZoneInfo(settings.TIMEZONE)).date()
    date_from = date_from or today
    date_to = date_to or today
    if date_to < date_from:
        raise HTTPException(status_code=400, detail="'to' must not be before 'from'")

    return OrdersQuery(
        date_from=date_from,
        date_to=date_to,
        page_size=page_size,
        max_pages=max_pages,
        include_shipment=include_shipment,
        date_mode=date_mode,
    )
