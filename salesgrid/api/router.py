"""
API Router - JSON / CSV endpoints
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from salesgrid.api.orders import orders_router
from salesgrid.api.debug import debug_router

api_router = APIRouter()

# Include sub-routers
api_router.include_router(orders_router)
api_router.include_router(debug_router)


@api_router.get("/", response_class=PlainTextResponse)
async def index():
    return (
        "SalesGrid OK. Endpoints: /health, /orders, /orders.csv, /debug/token, /debug/ml, "
        "/debug/orders_raw, /debug/costs, /debug/costs_raw, /debug/missing_costs, /debug/taxes"
    )
