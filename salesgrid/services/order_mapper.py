"""
Order Mapper - one marketplace order (plus its payments, shipment and the
cost table) to one report row.

Upstream data is partial by nature: not every order has a shipment, a
resolvable payment or a cost entry. Missing pieces become 0 / "" instead
of errors.
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

from salesgrid.schemas.row import OrderRow, compute_neto, compute_ganancia
from salesgrid.services.date_pivot import approved_payments, pivot_timestamp
from salesgrid.services.options import ReportOptions
from salesgrid.services.shipping import compute_shipment_cost, qualifying_price
from salesgrid.utils.money import to_number, round2, format_local

logger = logging.getLogger(__name__)


# ========== Extractors ==========

def _items(order: Dict[str, Any]) -> List[Dict[str, Any]]:
    items = order.get("order_items")
    return [it for it in items if isinstance(it, dict)] if isinstance(items, list) else []


def _first_item(order: Dict[str, Any]) -> Dict[str, Any]:
    items = _items(order)
    return items[0] if items else {}


def _quantity(item: Dict[str, Any]) -> float:
    return to_number(item.get("quantity")) or 1.0


def get_titulo(order: Dict[str, Any]) -> str:
    title = (_first_item(order).get("item") or {}).get("title")
    return str(title) if title is not None else ""


def get_precio_base(order: Dict[str, Any]) -> float:
    item = _first_item(order)
    return round2(to_number(item.get("full_unit_price")) * _quantity(item))


def get_precio_final(order: Dict[str, Any]) -> float:
    # total_amount is the items total, without shipping
    if order.get("total_amount") is not None:
        return round2(to_number(order.get("total_amount")))
    item = _first_item(order)
    return round2(to_number(item.get("unit_price")) * _quantity(item))


def get_precio_sin_interes(payments: List[Dict[str, Any]]) -> Optional[float]:
    approved = approved_payments(payments)
    if not approved:
        return None
    return round2(sum(to_number(p.get("transaction_amount")) for p in approved))


def get_descuento_pct(order: Dict[str, Any]) -> float:
    item = _first_item(order)
    full = to_number(item.get("full_unit_price"))
    if full <= 0:
        return 0.0
    return round2((1 - to_number(item.get("unit_price")) / full) * 100)


def get_cargo_venta(order: Dict[str, Any]) -> float:
    return round2(sum(to_number(it.get("sale_fee")) for it in _items(order)))


def get_impuesto(payments: List[Dict[str, Any]], tax_override: Optional[float] = None) -> float:
    if tax_override is not None:
        return round2(tax_override)
    approved = approved_payments(payments)
    return round2(approved[0].get("taxes_amount")) if approved else 0.0


def get_cuotas(payments: List[Dict[str, Any]]) -> int:
    approved = approved_payments(payments)
    if not approved:
        return 0
    return int(to_number(approved[0].get("installments")))


def _cost_keys(item: Dict[str, Any]) -> List[str]:
    listing = item.get("item") or {}
    keys = [listing.get("id"), listing.get("seller_sku"), item.get("variation_id")]
    return [str(k) for k in keys if k not in (None, "")]


def get_costo(order: Dict[str, Any], cost_table: Dict[str, float]) -> float:
    """Unit cost x quantity, summed over the order's items"""
    total = 0.0
    for item in _items(order):
        unit_cost = 0.0
        for key in _cost_keys(item):
            if key in cost_table:
                unit_cost = to_number(cost_table[key])
                break
        total += round2(unit_cost * _quantity(item))
    return round2(total)


# ========== Mapping ==========

def map_order(
    order: Dict[str, Any],
    payments: Optional[Iterable[Dict[str, Any]]],
    shipment: Optional[Dict[str, Any]],
    cost_table: Optional[Dict[str, float]],
    tax_override: Optional[float] = None,
    *,
    options: Optional[ReportOptions] = None,
) -> OrderRow:
    """
    Build the report row for one order.

    `tax_override` is a tax figure fetched from the payment provider; when
    given it wins over the tax reported on the payment. ENVIO here is
    provisional: the shipping allocator may rewrite it when the shipment is
    shared with other orders of the batch.
    """
    options = options or ReportOptions()
    order = order or {}
    payments = list(payments) if payments else list(order.get("payments") or [])
    cost_table = cost_table or {}

    precio_final = get_precio_final(order)
    precio_base = get_precio_base(order)
    cargo_venta = get_cargo_venta(order)
    impuesto = get_impuesto(payments, tax_override)

    price = qualifying_price(precio_base, precio_final, options.price_field)
    envio = round2(compute_shipment_cost(shipment, price, options.free_shipping_threshold))

    costo = get_costo(order, cost_table)
    neto = compute_neto(precio_final, envio, impuesto, cargo_venta)
    ganancia = compute_ganancia(neto, costo, options.profit_mode)

    row = OrderRow(
        order_id=order.get("id", 0),
        fecha=format_local(pivot_timestamp(order, payments, options.date_mode), options.timezone),
        titulo=get_titulo(order),
        precio_final=precio_final,
        neto=neto,
        costo=costo,
        ganancia=ganancia,
        precio_base=precio_base,
        descuento_pct=get_descuento_pct(order),
        envio=envio,
        impuesto=impuesto,
        cargo_venta=cargo_venta,
        cuotas=get_cuotas(payments),
        precio_final_sin_interes=get_precio_sin_interes(payments),
    )

    if options.log_neto:
        logger.debug(
            f"[NETO] {row.order_id}: precio_final={precio_final} envio={envio} "
            f"impuesto={impuesto} cargo={cargo_venta} neto={neto} costo={costo} "
            f"ganancia={ganancia} precio_base={precio_base} descuento={row.descuento_pct}"
        )

    return row
