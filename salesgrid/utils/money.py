"""
Number, money and timestamp helpers shared by the report pipeline.
None of these raise on bad input.
"""
import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")


def to_number(value: Any) -> float:
    """Numeric value of `value`, or 0.0 when it is missing, unparseable or not finite"""
    if value is None:
        return 0.0
    try:
        n = float(value)
    except (TypeError, ValueError, InvalidOperation):
        return 0.0
    return n if math.isfinite(n) else 0.0


def _round_half_up(value: Any, quantum: Decimal) -> float:
    n = to_number(value)
    # repr() gives the shortest decimal that maps to the same double,
    # so 2.005 is rounded as 2.005 and not as 2.00499999...
    return float(Decimal(repr(n)).quantize(quantum, rounding=ROUND_HALF_UP))


def round2(value: Any) -> float:
    """
    Round to cents, half away from zero: 2.005 -> 2.01 and -2.005 -> -2.01.
    Negative amounts mirror positive ones; they are not rounded towards +inf.
    """
    return _round_half_up(value, _CENT)


def round1(value: Any) -> float:
    """Round to one decimal (percentages), half away from zero"""
    return _round_half_up(value, _TENTH)


def to_cents(value: Any) -> int:
    return int(Decimal(repr(round2(value))) * 100)


def from_cents(cents: int) -> float:
    return round2(cents / 100)


def parse_timestamp(value: Any) -> Optional[int]:
    """
    Epoch milliseconds for an ISO-8601 string, a datetime or a number
    (already epoch ms). Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None

    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def format_local(ts_ms: Optional[int], tz: Union[str, ZoneInfo]) -> str:
    """`YYYY-MM-DD HH:MM:SS` in the given zone, or "" without a timestamp"""
    if ts_ms is None:
        return ""
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    try:
        dt = datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return dt.astimezone(zone).strftime("%Y-%m-%d %H:%M:%S")
