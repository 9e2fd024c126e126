"""
Orders API - the sales grid as JSON or CSV
"""
import urllib.parse

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from salesgrid.api.deps import get_orders_query, get_report_service
from salesgrid.schemas.report import OrdersQuery, OrdersResponse
from salesgrid.schemas.row import headers
from salesgrid.services.csv_export import csv_filename, render_csv
from salesgrid.services.report_service import ReportService

orders_router = APIRouter(tags=["Orders"])


@orders_router.get("/orders", response_model=OrdersResponse, response_model_by_alias=True)
async def list_orders(
    query: OrdersQuery = Depends(get_orders_query),
    service: ReportService = Depends(get_report_service),
):
    """
    Sales grid for a date range.

    Query:
        from / to: local dates, default today
        pageSize: marketplace page size (max 50)
        maxPages: pages to walk
        includeShipment: fetch /shipments/{id} per order
        dateMode: created | paid | both (default from settings)
    """
    result = await service.build_report(query)
    include = result.options.include_price_without_interest
    return OrdersResponse(
        date_from=query.date_from,
        date_to=query.date_to,
        count=len(result.rows),
        headers=headers(include),
        rows=result.as_lists(),
    )


@orders_router.get("/orders.csv")
async def export_orders_csv(
    query: OrdersQuery = Depends(get_orders_query),
    service: ReportService = Depends(get_report_service),
):
    """Same grid as /orders, as a CSV download"""
    result = await service.build_report(query)
    content = render_csv(headers(result.options.include_price_without_interest), result.as_lists())

    filename = urllib.parse.quote(csv_filename(query.date_from, query.date_to))
    return StreamingResponse(
        iter([content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )
