# Services Package
from .options import ReportOptions
from .order_mapper import map_order
from .shipping import AllocationItem, ShippingAllocator, allocate, compute_shipment_cost
from .cost_service import build_cost_table, parse_cost, find_missing_costs
from . import date_pivot
from .report_service import ReportService, ReportResult
from .csv_export import render_csv

__all__ = [
    "ReportOptions",
    "map_order",
    "AllocationItem",
    "ShippingAllocator",
    "allocate",
    "compute_shipment_cost",
    "build_cost_table",
    "parse_cost",
    "find_missing_costs",
    "date_pivot",
    "ReportService",
    "ReportResult",
    "render_csv",
]
