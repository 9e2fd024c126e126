"""
Mercado Pago Client - payment detail, used for the tax figure of an order
"""
from typing import Optional, Dict, Any, Iterable
import logging

from .base import BaseAPIClient, PlatformAPIError
from salesgrid.utils.money import to_number

logger = logging.getLogger(__name__)


def tax_from_charges(payment_detail: Dict[str, Any]) -> float:
    """Sum of charges_details entries of type "tax" """
    total = 0.0
    for charge in (payment_detail or {}).get("charges_details") or []:
        if (charge or {}).get("type") != "tax":
            continue
        amounts = charge.get("amounts") or {}
        for value in (amounts.get("original"), amounts.get("payer"), amounts.get("collector"), charge.get("amount")):
            if value is not None:
                total += to_number(value)
                break
    return total


class MercadoPagoClient(BaseAPIClient):
    PLATFORM_NAME = "mercadopago"
    BASE_URL = "https://api.mercadopago.com"

    async def get_payment(self, payment_id: Any) -> Dict[str, Any]:
        return await self._get_object(f"/v1/payments/{payment_id}")

    async def compute_taxes(self, payments: Iterable[Dict[str, Any]]) -> Optional[float]:
        """
        Total tax across an order's payments. None without an access token.
        A payment whose detail can't be fetched is logged and skipped; when no
        detail could be fetched at all the result is None, not 0.
        """
        if not self.access_token:
            return None

        total = 0.0
        fetched = 0
        for payment in payments or []:
            payment_id = (payment or {}).get("id")
            if not payment_id:
                continue
            try:
                detail = await self.get_payment(payment_id)
            except PlatformAPIError as e:
                logger.warning(f"[mp/taxes] payment {payment_id} failed: {e.status_code or e}")
                continue
            total += tax_from_charges(detail)
            fetched += 1

        return total if fetched else None
