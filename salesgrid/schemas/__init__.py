# Pydantic Schemas Package
from .row import Column, OrderRow, columns, headers, column_index, compute_neto, compute_ganancia
from .report import OrdersQuery, OrdersResponse

__all__ = [
    "Column", "OrderRow", "columns", "headers", "column_index",
    "compute_neto", "compute_ganancia",
    "OrdersQuery", "OrdersResponse",
]
