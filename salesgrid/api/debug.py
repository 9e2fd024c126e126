"""
Debug API - credential, marketplace and cost-sheet diagnostics
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from salesgrid.api.deps import get_orders_query, get_report_service
from salesgrid.schemas.report import OrdersQuery
from salesgrid.services.cost_service import preview_cost_rows
from salesgrid.services.report_service import ReportService

debug_router = APIRouter(prefix="/debug", tags=["Debug"])


@debug_router.get("/token")
async def debug_token(service: ReportService = Depends(get_report_service)):
    token = await service.get_ml_token()
    return {
        "ok": True,
        "tokenLength": len(token),
        "preview": token[:12] + "..." if token else "",
    }


@debug_router.get("/ml")
async def debug_ml(service: ReportService = Depends(get_report_service)):
    await service.authorize()
    me = await service.ml.get_me()
    return {
        "ok": True,
        "id": me.get("id"),
        "nickname": me.get("nickname"),
        "site_id": me.get("site_id"),
        "status": me.get("status"),
    }


@debug_router.get("/orders_raw")
async def debug_orders_raw(
    query: OrdersQuery = Depends(get_orders_query),
    service: ReportService = Depends(get_report_service),
):
    orders = await service.sample_orders(query, limit=5)
    return {"ok": True, "count": len(orders), "sample": orders[:2]}


@debug_router.get("/costs")
async def debug_costs(service: ReportService = Depends(get_report_service)):
    table = await service.get_cost_table()
    entries = list(table.items())
    return {"ok": True, "count": len(entries), "sample": entries[:5]}


@debug_router.get("/costs_raw")
async def debug_costs_raw(service: ReportService = Depends(get_report_service)):
    sheet = service.settings.GS_COSTS_SHEET
    rows = await service.sheets.get_values(f"{sheet}!A1:M50")
    return {"ok": True, "sheet": sheet, "rows": preview_cost_rows(rows)}


@debug_router.get("/missing_costs")
async def debug_missing_costs(
    query: OrdersQuery = Depends(get_orders_query),
    service: ReportService = Depends(get_report_service),
):
    _, missing = await service.missing_costs(query)
    return {
        "ok": True,
        "from": query.date_from.isoformat(),
        "to": query.date_to.isoformat(),
        "missingCount": len(missing),
        "missing": [{"id": item_id, "title": title} for item_id, title in missing.items()][:200],
        "note": "Load these item ids in Comparador!A (cost in column M) to fill COSTO and GANANCIA.",
    }


@debug_router.get("/taxes")
async def debug_taxes(
    id: str = Query(None, description="Order id"),
    service: ReportService = Depends(get_report_service),
):
    if not id:
        raise HTTPException(status_code=400, detail="Missing ?id=ORDER_ID")
    taxes = await service.order_taxes(id)
    return {"ok": True, "order_id": id, **taxes}
