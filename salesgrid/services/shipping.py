"""
Shipping cost - per-order shipping charge and shared-shipment allocation.

Mercado Libre reports the full cost of a shipment on every order packed
into it. Summing ENVIO naively over a pack bills the seller once per order,
so after the whole batch is mapped the allocator groups orders by shipment
and splits the real cost across the orders that are not free-shipping.
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from salesgrid.schemas.row import OrderRow
from salesgrid.services.options import ReportOptions
from salesgrid.utils.money import to_number, to_cents, from_cents

logger = logging.getLogger(__name__)

SPLIT_POLICIES = ("first", "even", "by_price")


# ========== Free-shipping rules ==========

def qualifying_price(precio_base: Optional[float], precio_final: Optional[float], price_field: str = "base") -> float:
    """Price checked against the free-shipping threshold"""
    base = to_number(precio_base)
    final = to_number(precio_final)
    if price_field == "final":
        return final if final > 0 else base
    return base if base > 0 else final


def is_free_shipping(price: float, options: ReportOptions) -> bool:
    if options.free_shipping_inclusive:
        return price <= options.free_shipping_threshold
    return price < options.free_shipping_threshold


def _row_qualifying_price(row: OrderRow, options: ReportOptions) -> float:
    return qualifying_price(row.precio_base, row.precio_final, options.price_field)


def _row_weight(row: OrderRow) -> float:
    # Prefer the amount without financing interest, fall back to the buyer-paid total
    price = row.precio_final_sin_interes
    if price is None or to_number(price) <= 0:
        price = row.precio_final
    price = to_number(price)
    return price if price > 0 else 0.0


# ========== Shipment payload ==========

def _shipping_option(shipment: Dict[str, Any]) -> Dict[str, Any]:
    return shipment.get("shipping_option") or {}


def shipment_list_cost(shipment: Dict[str, Any]) -> float:
    option = _shipping_option(shipment)
    for value in (option.get("list_cost"), shipment.get("list_cost"), option.get("cost")):
        if value is not None:
            return to_number(value)
    return 0.0


def shipment_receiver_cost(shipment: Dict[str, Any]) -> float:
    return to_number(shipment.get("receiver_cost"))


def shipment_paid_by(shipment: Dict[str, Any]) -> Optional[str]:
    option = _shipping_option(shipment)
    paid_by = (option.get("cost_components") or {}).get("paid_by") or shipment.get("paid_by")
    return str(paid_by).lower() if paid_by else None


def compute_shipment_cost(
    shipment: Optional[Dict[str, Any]],
    price: float,
    threshold: float,
) -> float:
    """
    Provisional shipping cost of one order from its shipment:
    - no shipment, or the buyer paid (receiver_cost > 0) -> 0
    - seller is the payer, or price at/above the free-shipping threshold -> list cost
    - otherwise -> 0
    """
    if not shipment:
        return 0.0

    if shipment_receiver_cost(shipment) > 0:
        return 0.0

    if shipment_paid_by(shipment) == "seller" or to_number(price) >= threshold:
        return shipment_list_cost(shipment)

    return 0.0


# ========== Allocation ==========

@dataclass
class AllocationItem:
    order: Dict[str, Any]
    shipment: Optional[Dict[str, Any]]
    row: OrderRow


def group_key(item: AllocationItem) -> Optional[str]:
    """Shipment id, else pack id, else the order's shipping id"""
    shipment = item.shipment or {}
    order = item.order or {}
    for candidate in (
        shipment.get("id"),
        order.get("pack_id"),
        (order.get("shipping") or {}).get("id"),
    ):
        if candidate not in (None, ""):
            return str(candidate)
    return None


def split_even(total_cents: int, n: int) -> List[int]:
    """Integer cents, remainder to the earliest parts"""
    if n <= 0:
        return []
    base, remainder = divmod(total_cents, n)
    return [base + 1 if i < remainder else base for i in range(n)]


def split_by_weight(total_cents: int, weights: List[float]) -> List[int]:
    """
    Floor share per weight for all but the last part; the last part takes
    what is left so the parts always add up to `total_cents`.
    """
    total_weight = sum(w for w in weights if w > 0)
    if total_weight <= 0:
        return split_even(total_cents, len(weights))

    shares = []
    for w in weights[:-1]:
        w = w if w > 0 else 0.0
        shares.append(int(total_cents * w // total_weight))
    shares.append(total_cents - sum(shares))
    return shares


def split_first(total_cents: int, n: int) -> List[int]:
    if n <= 0:
        return []
    return [total_cents] + [0] * (n - 1)


class ShippingAllocator:
    """
    Reallocates ENVIO across rows that share a shipment.

    Must run once per batch, after every order in the batch is mapped: the
    group total and the weights depend on full group membership. Rows it
    returns are flagged `shipping_allocated`; feeding them back is a no-op.
    """

    def __init__(self, options: ReportOptions):
        if options.split_policy not in SPLIT_POLICIES:
            logger.warning(f"Unknown split policy {options.split_policy!r}, using by_price")
        self.options = options

    def allocate(self, items: List[AllocationItem]) -> List[OrderRow]:
        """New rows, in the same order as `items`"""
        result: List[Optional[OrderRow]] = [None] * len(items)
        groups: "OrderedDict[str, List[int]]" = OrderedDict()

        for idx, item in enumerate(items):
            if item.row.shipping_allocated:
                logger.warning(
                    f"Row {item.row.order_id} already went through shipping allocation; leaving it unchanged"
                )
                result[idx] = item.row
                continue

            key = group_key(item)
            if key is None:
                result[idx] = self._threshold_only(item.row)
            else:
                groups.setdefault(key, []).append(idx)

        for key, indexes in groups.items():
            if len(indexes) == 1:
                idx = indexes[0]
                result[idx] = self._threshold_only(items[idx].row)
                continue

            rows = [items[i].row for i in indexes]
            for idx, row in zip(indexes, self._allocate_group(key, rows)):
                result[idx] = row

        return result

    def _threshold_only(self, row: OrderRow) -> OrderRow:
        price = _row_qualifying_price(row, self.options)
        envio = 0.0 if is_free_shipping(price, self.options) else row.envio
        return row.with_shipping(envio, self.options.profit_mode, allocated=True)

    def _allocate_group(self, key: str, rows: List[OrderRow]) -> List[OrderRow]:
        # Same shipment cost is duplicated on every line; the max is the real total
        total_cents = to_cents(max(to_number(r.envio) for r in rows))
        shares = [0] * len(rows)

        if total_cents > 0:
            eligible = [
                i for i, r in enumerate(rows)
                if not is_free_shipping(_row_qualifying_price(r, self.options), self.options)
            ]
            if eligible:
                parts = self._split(total_cents, [rows[i] for i in eligible])
                for i, cents in zip(eligible, parts):
                    shares[i] = cents

        logger.debug(
            f"[shipping] group {key}: total={from_cents(total_cents)} "
            f"policy={self.options.split_policy} shares={[from_cents(s) for s in shares]}"
        )

        return [
            row.with_shipping(from_cents(cents), self.options.profit_mode, allocated=True)
            for row, cents in zip(rows, shares)
        ]

    def _split(self, total_cents: int, eligible_rows: List[OrderRow]) -> List[int]:
        policy = self.options.split_policy
        n = len(eligible_rows)
        if policy == "first":
            return split_first(total_cents, n)
        if policy == "even":
            return split_even(total_cents, n)
        return split_by_weight(total_cents, [_row_weight(r) for r in eligible_rows])


def allocate(items: List[AllocationItem], options: ReportOptions) -> List[OrderRow]:
    return ShippingAllocator(options).allocate(items)
