"""
Report Options - the knobs the mapper and the shipping allocator read,
snapshotted from settings once per batch.
"""
from dataclasses import dataclass
from typing import Optional

from salesgrid.core.config import Settings


@dataclass(frozen=True)
class ReportOptions:
    free_shipping_threshold: float = 33000.0
    free_shipping_inclusive: bool = True
    price_field: str = "base"  # base | final
    split_policy: str = "by_price"  # first | even | by_price
    date_mode: str = "both"  # created | paid | both
    timezone: str = "America/Argentina/Buenos_Aires"
    profit_mode: str = "percent"  # percent | absolute
    include_price_without_interest: bool = False
    log_neto: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, date_mode: Optional[str] = None) -> "ReportOptions":
        return cls(
            free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
            free_shipping_inclusive=settings.FREE_SHIPPING_INCLUSIVE,
            price_field=settings.FREE_SHIPPING_PRICE_FIELD,
            split_policy=settings.SHIPPING_SPLIT_POLICY,
            date_mode=date_mode or settings.DATE_PIVOT_MODE,
            timezone=settings.TIMEZONE,
            profit_mode=settings.PROFIT_MODE,
            include_price_without_interest=settings.INCLUDE_PRICE_WITHOUT_INTEREST,
            log_neto=settings.LOG_NETO,
        )
