"""
Report Service - builds one batch of sales rows.

Pipeline per batch:
1. resolve token, seller and cost table (cached, mandatory)
2. page through /orders/search, dropping cancelled orders
3. enrich each order concurrently (payments, tax, shipment), bounded by a semaphore
4. apply the date-pivot cutoff and map each order to a row
5. run the shipping allocator once over the whole batch
"""
import asyncio
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo
import logging

from salesgrid.core.cache import AppCaches
from salesgrid.core.config import Settings
from salesgrid.integrations import (
    GoogleSheetsClient,
    MercadoLibreClient,
    MercadoPagoClient,
    PlatformAPIError,
)
from salesgrid.schemas.report import OrdersQuery
from salesgrid.schemas.row import OrderRow
from salesgrid.services.cost_service import build_cost_table, find_missing_costs
from salesgrid.services.date_pivot import is_in_range
from salesgrid.services.options import ReportOptions
from salesgrid.services.order_mapper import map_order
from salesgrid.services.shipping import AllocationItem, ShippingAllocator

logger = logging.getLogger(__name__)


@dataclass
class ReportWindow:
    start: datetime
    end: datetime
    search_from: datetime

    @property
    def from_ms(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def to_ms(self) -> int:
        return int(self.end.timestamp() * 1000)


@dataclass
class ReportResult:
    window: ReportWindow
    rows: List[OrderRow]
    options: ReportOptions

    def as_lists(self) -> List[List[Any]]:
        return [r.as_list(self.options.include_price_without_interest) for r in self.rows]


def build_window(date_from: date, date_to: date, tz: str, date_mode: str, lookback_days: int) -> ReportWindow:
    """Local whole days; the upstream search starts earlier unless pivoting on creation"""
    zone = ZoneInfo(tz)
    start = datetime.combine(date_from, time.min, tzinfo=zone)
    end = datetime.combine(date_to, time.max, tzinfo=zone)
    search_from = start if date_mode == "created" else start - timedelta(days=lookback_days)
    return ReportWindow(start=start, end=end, search_from=search_from)


def filter_active(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [o for o in orders if (o or {}).get("status") != "cancelled"]


class ReportService:
    """
    Sales report pipeline. One instance per request; caches are shared and
    injected, clients are cheap.
    """

    def __init__(
        self,
        settings: Settings,
        caches: AppCaches,
        ml_client: MercadoLibreClient,
        mp_client: MercadoPagoClient,
        sheets_client: GoogleSheetsClient,
    ):
        self.settings = settings
        self.caches = caches
        self.ml = ml_client
        self.mp = mp_client
        self.sheets = sheets_client

    # ========== Mandatory collaborators ==========

    async def get_ml_token(self) -> str:
        if self.settings.ML_ACCESS_TOKEN:
            return self.settings.ML_ACCESS_TOKEN

        async def load() -> str:
            token = await self.sheets.read_cell(self.settings.GS_TOKENS_SHEET, self.settings.GS_TOKENS_CELL)
            if not token:
                raise PlatformAPIError("Mercado Libre token cell is empty", status_code=400)
            return token

        return await self.caches.ml_token.get_or_load(load)

    async def authorize(self) -> str:
        token = await self.get_ml_token()
        self.ml.set_token(token)
        return token

    async def get_seller_id(self) -> Any:
        return await self.caches.seller_id.get_or_load(self.ml.get_user_id)

    async def get_cost_rows(self) -> List[List[Any]]:
        return await self.sheets.get_values(f"{self.settings.GS_COSTS_SHEET}!A2:M")

    async def get_cost_table(self) -> Dict[str, float]:
        if not self.settings.GS_SHEET_ID:
            logger.warning("GS_SHEET_ID not set; COSTO / GANANCIA will be 0")
            return {}

        async def load() -> Dict[str, float]:
            return build_cost_table(await self.get_cost_rows())

        return await self.caches.cost_table.get_or_load(load)

    # ========== Paging ==========

    async def iter_order_pages(self, seller_id: Any, window: ReportWindow, page_size: int, max_pages: int):
        """Yields raw pages (cancelled orders included) until a short page"""
        offset = 0
        for _ in range(max_pages):
            result = await self.ml.search_orders(
                seller_id,
                time_from=window.search_from,
                time_to=window.end,
                limit=page_size,
                offset=offset,
            )
            raw = result.get("orders") or []
            if not raw:
                break

            yield raw

            # Use the raw page length: filtering cancelled orders must not end paging early
            if len(raw) < page_size:
                break
            offset += page_size

    # ========== Enrichment ==========

    async def fetch_payments(self, order: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            return await self.ml.get_order_payments(order.get("id"))
        except PlatformAPIError as e:
            if e.status_code == 403:
                embedded = order.get("payments") or []
                logger.warning(
                    f"[payments] 403 on /orders/{order.get('id')}/payments, "
                    f"using {len(embedded)} embedded payments"
                )
                return embedded
            raise

    async def fetch_tax(self, payments: List[Dict[str, Any]]) -> Optional[float]:
        try:
            return await self.mp.compute_taxes(payments)
        except (PlatformAPIError, asyncio.TimeoutError) as e:
            logger.warning(f"[taxes] lookup failed, using payment tax: {e}")
            return None

    # ========== Batch ==========

    async def build_report(self, query: OrdersQuery) -> ReportResult:
        options = ReportOptions.from_settings(self.settings, query.date_mode)
        window = build_window(
            query.date_from,
            query.date_to,
            options.timezone,
            options.date_mode,
            self.settings.PAID_LOOKBACK_DAYS,
        )

        await self.authorize()
        cost_table = await self.get_cost_table()
        seller_id = await self.get_seller_id()

        sem = asyncio.Semaphore(max(self.settings.MAX_CONCURRENCY, 1))
        shipment_tasks: Dict[str, asyncio.Task] = {}

        async def fetch_shipment(order: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            shipment_id = MercadoLibreClient.shipment_id_of(order)
            if not query.include_shipment or not shipment_id:
                return None
            key = str(shipment_id)
            # Orders of one pack share the shipment: fetch it once per batch
            if key not in shipment_tasks:
                shipment_tasks[key] = asyncio.ensure_future(self.ml.get_shipment(shipment_id))
            try:
                return await shipment_tasks[key]
            except (PlatformAPIError, asyncio.TimeoutError) as e:
                logger.warning(f"[shipment] {shipment_id} unavailable for order {order.get('id')}: {e}")
                return None

        async def enrich(order: Dict[str, Any]) -> Optional[AllocationItem]:
            async with sem:
                payments = await self.fetch_payments(order)
                if not is_in_range(order, payments, options.date_mode, window.from_ms, window.to_ms):
                    return None

                tax = await self.fetch_tax(payments)
                shipment = await fetch_shipment(order)
                row = map_order(order, payments, shipment, cost_table, tax, options=options)
                return AllocationItem(order=order, shipment=shipment, row=row)

        items: List[AllocationItem] = []
        fetched = 0
        try:
            async for raw in self.iter_order_pages(seller_id, window, query.page_size, query.max_pages):
                fetched += len(raw)
                # Let every enrichment of the page settle before failing the batch
                page = await asyncio.gather(*(enrich(o) for o in filter_active(raw)), return_exceptions=True)
                errors = [r for r in page if isinstance(r, BaseException)]
                if errors:
                    raise errors[0]
                items.extend(item for item in page if item is not None)
        finally:
            for task in shipment_tasks.values():
                if not task.done():
                    task.cancel()

        # Allocation needs complete group membership: run it once, on the whole batch
        rows = ShippingAllocator(options).allocate(items)

        logger.info(
            f"Report {query.date_from}..{query.date_to} mode={options.date_mode}: "
            f"fetched={fetched} rows={len(rows)} shipments={len(shipment_tasks)}"
        )
        return ReportResult(window=window, rows=rows, options=options)

    # ========== Diagnostics ==========

    async def sample_orders(self, query: OrdersQuery, limit: int = 5) -> List[Dict[str, Any]]:
        options = ReportOptions.from_settings(self.settings, query.date_mode)
        window = build_window(query.date_from, query.date_to, options.timezone, "created", 0)
        await self.authorize()
        seller_id = await self.get_seller_id()
        result = await self.ml.search_orders(seller_id, window.start, window.end, limit=limit, offset=0)
        return filter_active(result.get("orders") or [])

    async def missing_costs(self, query: OrdersQuery) -> Tuple[ReportWindow, Dict[str, Optional[str]]]:
        options = ReportOptions.from_settings(self.settings, query.date_mode)
        window = build_window(query.date_from, query.date_to, options.timezone, "created", 0)
        await self.authorize()
        cost_table = await self.get_cost_table()
        seller_id = await self.get_seller_id()

        missing: Dict[str, Optional[str]] = {}
        async for raw in self.iter_order_pages(seller_id, window, query.page_size, query.max_pages):
            find_missing_costs(raw, cost_table, missing)
        return window, missing

    async def order_taxes(self, order_id: Any) -> Dict[str, Any]:
        await self.authorize()
        order = await self.ml.get_order(order_id)
        try:
            payments = await self.ml.get_order_payments(order_id)
        except PlatformAPIError:
            payments = order.get("payments") or []

        return {
            "order_taxes_amount": (order.get("taxes") or {}).get("amount"),
            "order_taxes_obj": order.get("taxes"),
            "payments_taxes_amounts": [p.get("taxes_amount") for p in payments],
            "payments_taxes_raw": [
                {"id": p.get("id"), "taxes_amount": p.get("taxes_amount"), "fee_details": p.get("fee_details")}
                for p in payments
            ],
            "mp_taxes": await self.fetch_tax(payments),
            "sample_payment": payments[0] if payments else None,
        }
