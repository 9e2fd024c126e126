"""
SalesGrid - Mercado Libre sales report
FastAPI Application Entry Point
"""
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from salesgrid.core import settings, AppCaches
from salesgrid.api.router import api_router
from salesgrid.integrations import PlatformAPIError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
if settings.LOG_NETO:
    logging.getLogger('salesgrid.services.order_mapper').setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Token, seller id and cost table live here, not in module globals
    app.state.caches = AppCaches(ttl_seconds=settings.CACHE_TTL_SECONDS)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")

    yield

    app.state.caches.clear()
    logger.info(f"{settings.APP_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Per-order financial rows for a Mercado Libre seller",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(PlatformAPIError)
async def platform_error_handler(request: Request, exc: PlatformAPIError):
    # Mandatory collaborator failed (token, seller, cost sheet, orders): whole batch fails
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    status_code = 400 if exc.status_code == 400 else 502
    return JSONResponse(status_code=status_code, content={"error": str(exc), "upstream_status": exc.status_code})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid query", "detail": jsonable_encoder(exc.errors())})


# Include routers
app.include_router(api_router)

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )
