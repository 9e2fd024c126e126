"""
Report Row Schema

Fixed column order of the sales grid. Every producer and consumer goes
through `Column` / `columns()`; reordering here is a breaking change for
the spreadsheet that consumes the export.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Union

from salesgrid.utils.money import round1, round2


class Column(str, Enum):
    ID_DE_VENTA = "ID DE VENTA"
    FECHA = "FECHA"
    TITULO = "TITULO"
    PRECIO_FINAL = "Precio Final"
    NETO = "NETO"
    COSTO = "COSTO"
    GANANCIA = "GANANCIA"
    PRECIO_BASE = "PRECIO BASE"
    PCT_DESCUENTO = "% DESCUENTO"
    PRECIO_FINAL_SIN_INTERES = "Precio Final sin interés"
    ENVIO = "ENVIO"
    IMPUESTO = "IMPUESTO"
    CARGO_X_VENTA = "CARGO X VENTA"
    CUOTAS = "CUOTAS"


_ALL_COLUMNS = list(Column)


def columns(include_price_without_interest: bool = False) -> List[Column]:
    if include_price_without_interest:
        return list(_ALL_COLUMNS)
    return [c for c in _ALL_COLUMNS if c is not Column.PRECIO_FINAL_SIN_INTERES]


def headers(include_price_without_interest: bool = False) -> List[str]:
    return [c.value for c in columns(include_price_without_interest)]


def column_index(column: Column, include_price_without_interest: bool = False) -> int:
    return columns(include_price_without_interest).index(column)


def compute_neto(precio_final: float, envio: float, impuesto: float, cargo: float) -> float:
    return round2(precio_final - (envio + impuesto + cargo))


def compute_ganancia(neto: float, costo: float, mode: str = "percent") -> float:
    """
    Profit over cost. `percent` is (neto - costo) / costo * 100; `absolute`
    is neto - costo. Without a known cost the profit is reported as 0.
    """
    if costo <= 0:
        return 0
    if mode == "absolute":
        return round2(neto - costo)
    return round1((neto - costo) / costo * 100)


Scalar = Union[str, int, float, None]


@dataclass(frozen=True)
class OrderRow:
    """One order's financial summary. Immutable; use `with_shipping` to derive."""
    order_id: Any
    fecha: str
    titulo: str
    precio_final: float
    neto: float
    costo: float
    ganancia: float
    precio_base: float
    descuento_pct: float
    envio: float
    impuesto: float
    cargo_venta: float
    cuotas: int
    precio_final_sin_interes: Optional[float] = None
    shipping_allocated: bool = False

    def value(self, column: Column) -> Scalar:
        return {
            Column.ID_DE_VENTA: self.order_id,
            Column.FECHA: self.fecha,
            Column.TITULO: self.titulo,
            Column.PRECIO_FINAL: self.precio_final,
            Column.NETO: self.neto,
            Column.COSTO: self.costo,
            Column.GANANCIA: self.ganancia,
            Column.PRECIO_BASE: self.precio_base,
            Column.PCT_DESCUENTO: self.descuento_pct,
            Column.PRECIO_FINAL_SIN_INTERES: self.precio_final_sin_interes,
            Column.ENVIO: self.envio,
            Column.IMPUESTO: self.impuesto,
            Column.CARGO_X_VENTA: self.cargo_venta,
            Column.CUOTAS: self.cuotas,
        }[column]

    def as_list(self, include_price_without_interest: bool = False) -> List[Scalar]:
        return [self.value(c) for c in columns(include_price_without_interest)]

    def with_shipping(
        self,
        envio: float,
        profit_mode: str = "percent",
        allocated: bool = False,
    ) -> "OrderRow":
        """New row with ENVIO replaced and NETO / GANANCIA recomputed"""
        envio = round2(envio)
        neto = compute_neto(self.precio_final, envio, self.impuesto, self.cargo_venta)
        return replace(
            self,
            envio=envio,
            neto=neto,
            ganancia=compute_ganancia(neto, self.costo, profit_mode),
            shipping_allocated=self.shipping_allocated or allocated,
        )
