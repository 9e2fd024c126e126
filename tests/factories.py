"""Builders for Mercado Libre payloads and report rows used across tests."""
from typing import Any, Dict, List, Optional

from salesgrid.schemas.row import OrderRow, compute_neto, compute_ganancia


def make_payment(
    payment_id: int = 9001,
    status: str = "approved",
    taxes_amount: float = 0,
    installments: int = 1,
    transaction_amount: Optional[float] = None,
    date_approved: Optional[str] = "2025-01-01T10:05:00.000-03:00",
    date_created: Optional[str] = "2025-01-01T10:00:00.000-03:00",
    **extra: Any,
) -> Dict[str, Any]:
    payment = {
        "id": payment_id,
        "status": status,
        "taxes_amount": taxes_amount,
        "installments": installments,
        "transaction_amount": transaction_amount,
        "date_approved": date_approved,
        "date_created": date_created,
    }
    payment.update(extra)
    return payment


def make_item(
    item_id: str = "MLA1",
    title: str = "Remera",
    full_unit_price: float = 1200,
    unit_price: float = 1000,
    quantity: int = 1,
    sale_fee: float = 100,
    seller_sku: Optional[str] = None,
    variation_id: Optional[int] = None,
) -> Dict[str, Any]:
    return {
        "item": {"id": item_id, "title": title, "seller_sku": seller_sku},
        "full_unit_price": full_unit_price,
        "unit_price": unit_price,
        "quantity": quantity,
        "sale_fee": sale_fee,
        "variation_id": variation_id,
    }


def make_order(
    order_id: int = 2000001,
    total_amount: Optional[float] = 1000,
    items: Optional[List[Dict[str, Any]]] = None,
    status: str = "paid",
    date_created: str = "2025-01-01T10:00:00.000-03:00",
    date_closed: Optional[str] = None,
    payments: Optional[List[Dict[str, Any]]] = None,
    pack_id: Optional[int] = None,
    shipping_id: Optional[int] = None,
) -> Dict[str, Any]:
    order = {
        "id": order_id,
        "status": status,
        "date_created": date_created,
        "date_closed": date_closed,
        "total_amount": total_amount,
        "order_items": items if items is not None else [make_item()],
        "payments": payments or [],
        "pack_id": pack_id,
        "shipping": {"id": shipping_id} if shipping_id else {},
    }
    return order


def make_shipment(
    shipment_id: Any = 4001,
    list_cost: float = 300,
    receiver_cost: float = 0,
    paid_by: Optional[str] = "seller",
) -> Dict[str, Any]:
    return {
        "id": shipment_id,
        "receiver_cost": receiver_cost,
        "shipping_option": {
            "list_cost": list_cost,
            "cost_components": {"paid_by": paid_by},
        },
    }


def make_row(
    order_id: Any = 1,
    precio_final: float = 40000,
    precio_base: Optional[float] = None,
    envio: float = 0,
    impuesto: float = 0,
    cargo_venta: float = 0,
    costo: float = 0,
    sin_interes: Optional[float] = None,
) -> OrderRow:
    precio_base = precio_final if precio_base is None else precio_base
    neto = compute_neto(precio_final, envio, impuesto, cargo_venta)
    return OrderRow(
        order_id=order_id,
        fecha="2025-01-01 10:00:00",
        titulo="Remera",
        precio_final=precio_final,
        neto=neto,
        costo=costo,
        ganancia=compute_ganancia(neto, costo),
        precio_base=precio_base,
        descuento_pct=0,
        envio=envio,
        impuesto=impuesto,
        cargo_venta=cargo_venta,
        cuotas=1,
        precio_final_sin_interes=sin_interes,
    )
