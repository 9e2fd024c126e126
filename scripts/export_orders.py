#!/usr/bin/env python3
"""
Export the sales grid for a date range to a CSV file (no web server).
Usage: python scripts/export_orders.py --from 2025-01-01 --to 2025-01-31 [--mode paid] [--out file.csv]
"""
import argparse
import asyncio
import logging
from datetime import date

from salesgrid.api.deps import get_report_service
from salesgrid.core import settings, AppCaches
from salesgrid.schemas.report import OrdersQuery
from salesgrid.schemas.row import headers
from salesgrid.services.csv_export import csv_filename, render_csv

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logging.getLogger('httpx').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


async def export(args) -> str:
    service = get_report_service(settings=settings, caches=AppCaches(settings.CACHE_TTL_SECONDS))
    query = OrdersQuery(
        date_from=args.date_from,
        date_to=args.date_to,
        max_pages=args.max_pages,
        include_shipment=not args.no_shipment,
        date_mode=args.mode,
    )
    result = await service.build_report(query)

    out_path = args.out or csv_filename(query.date_from, query.date_to)
    content = render_csv(headers(result.options.include_price_without_interest), result.as_lists())
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)

    logger.info(f"Wrote {len(result.rows)} rows to {out_path}")
    return out_path


def main():
    parser = argparse.ArgumentParser(description="Export Mercado Libre sales grid to CSV")
    parser.add_argument("--from", dest="date_from", type=date.fromisoformat, required=True)
    parser.add_argument("--to", dest="date_to", type=date.fromisoformat, required=True)
    parser.add_argument("--mode", choices=["created", "paid", "both"], default=None)
    parser.add_argument("--max-pages", type=int, default=20)
    parser.add_argument("--no-shipment", action="store_true", help="Skip /shipments lookups")
    parser.add_argument("--out", default=None)
    args = parser.parse_args()

    asyncio.run(export(args))


if __name__ == "__main__":
    main()
