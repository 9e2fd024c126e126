"""
Cost Service - unit cost per listing, read from the "Comparador" sheet
(column A = item id, column M = unit cost).
"""
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)

ID_COLUMN = 0
COST_COLUMN = 12  # M

_NOT_NUMERIC = re.compile(r"[^\d,.\-]")
_WHITESPACE = re.compile(r"\s+")


def clean_cost(raw: Any) -> str:
    """Strip spaces and symbols, drop thousand dots, decimal comma -> dot"""
    text = "" if raw is None else str(raw)
    text = _WHITESPACE.sub("", text)
    text = _NOT_NUMERIC.sub("", text)
    text = text.replace(".", "")
    return text.replace(",", ".", 1)


def parse_cost(raw: Any) -> Optional[float]:
    """'1.234,56' -> 1234.56; None when nothing numeric is left"""
    cleaned = clean_cost(raw)
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if len(row) > index else None


def build_cost_table(raw_rows: Iterable[Sequence[Any]]) -> Dict[str, float]:
    table: Dict[str, float] = {}
    skipped = 0
    for row in raw_rows or []:
        if not row:
            continue
        item_id = str(_cell(row, ID_COLUMN) or "").strip()
        if not item_id:
            continue
        cost = parse_cost(_cell(row, COST_COLUMN))
        if cost is None:
            skipped += 1
            continue
        table[item_id] = cost

    if skipped:
        logger.info(f"Cost table: {len(table)} entries, {skipped} rows without a usable cost")
    return table


def preview_cost_rows(raw_rows: Iterable[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Row-by-row view of column A / M and how M parses (debug endpoint)"""
    preview = []
    for i, row in enumerate(raw_rows or []):
        raw_cost = _cell(row, COST_COLUMN)
        parsed = parse_cost(raw_cost)
        preview.append({
            "row": i + 1,
            "A": _cell(row, ID_COLUMN),
            "M": raw_cost,
            "parsed": {
                "raw": "" if raw_cost is None else str(raw_cost),
                "cleaned": clean_cost(raw_cost),
                "num": parsed if parsed is not None else 0,
            },
        })
    return preview


def find_missing_costs(
    orders: Iterable[Dict[str, Any]],
    cost_table: Dict[str, float],
    missing: Optional[Dict[str, Optional[str]]] = None,
) -> Dict[str, Optional[str]]:
    """First-item listing ids (-> title) that have no cost entry"""
    missing = {} if missing is None else missing
    for order in orders:
        if (order or {}).get("status") == "cancelled":
            continue
        items = order.get("order_items") or []
        listing = (items[0].get("item") or {}) if items else {}
        item_id = listing.get("id")
        if item_id and str(item_id) not in cost_table and str(item_id) not in missing:
            missing[str(item_id)] = listing.get("title")
    return missing
