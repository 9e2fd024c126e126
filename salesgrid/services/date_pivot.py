"""
Date Pivot - which timestamp places an order inside a report window.

An order can be reported by when it was created or by when it was paid.
In `both` mode it is kept if either falls in the window, so a sale created
before the window but paid inside it is not dropped (and vice versa). The
caller widens the marketplace search by a lookback to catch those orders;
the cutoff itself is applied here. Nothing in this module does I/O.
"""
from typing import Any, Dict, Iterable, List, Optional

from salesgrid.utils.money import parse_timestamp

APPROVED_STATUSES = {"approved", "accredited"}
PIVOT_MODES = ("created", "paid", "both")


def is_approved(payment: Dict[str, Any]) -> bool:
    return str((payment or {}).get("status") or "").lower() in APPROVED_STATUSES


def approved_payments(payments: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [p for p in (payments or []) if isinstance(p, dict) and is_approved(p)]


def paid_timestamp(order: Dict[str, Any], payments: Optional[Iterable[Dict[str, Any]]]) -> Optional[int]:
    """
    Earliest of each approved payment's approval / accreditation / creation
    time and the order's closing time. None when nothing resolves.
    """
    candidates = []
    for p in approved_payments(payments):
        ts = (
            parse_timestamp(p.get("date_approved"))
            or parse_timestamp(p.get("date_accredited"))
            or parse_timestamp(p.get("date_created"))
        )
        if ts is not None:
            candidates.append(ts)

    closed = parse_timestamp((order or {}).get("date_closed"))
    if closed is not None:
        candidates.append(closed)

    return min(candidates) if candidates else None


def created_timestamp(order: Dict[str, Any]) -> Optional[int]:
    return parse_timestamp((order or {}).get("date_created"))


def _within(ts: Optional[int], from_ms: int, to_ms: int) -> bool:
    return ts is not None and from_ms <= ts <= to_ms


def is_in_range(
    order: Dict[str, Any],
    payments: Optional[Iterable[Dict[str, Any]]],
    mode: str,
    from_ms: int,
    to_ms: int,
) -> bool:
    """Inclusive window test on the created and/or paid timestamp"""
    created_ok = _within(created_timestamp(order), from_ms, to_ms)
    if mode == "created":
        return created_ok

    paid_ok = _within(paid_timestamp(order, payments), from_ms, to_ms)
    if mode == "paid":
        return paid_ok

    return created_ok or paid_ok


def pivot_timestamp(
    order: Dict[str, Any],
    payments: Optional[Iterable[Dict[str, Any]]],
    mode: str,
) -> Optional[int]:
    """Timestamp shown in the FECHA column"""
    if mode == "created":
        return created_timestamp(order)
    paid = paid_timestamp(order, payments)
    return paid if paid is not None else created_timestamp(order)


def needs_payment_lookup(order: Dict[str, Any], mode: str) -> bool:
    """True when the paid pivot cannot be resolved from embedded data"""
    if mode == "created":
        return False
    return paid_timestamp(order, order.get("payments")) is None
