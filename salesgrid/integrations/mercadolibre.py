"""
Mercado Libre Client
API Documentation: https://developers.mercadolibre.com.ar/
"""
from datetime import datetime
from typing import Optional, Dict, Any, List
import logging

from .base import BaseAPIClient, PlatformAPIError

logger = logging.getLogger(__name__)


class MercadoLibreClient(BaseAPIClient):
    """
    Mercado Libre REST client (seller side)
    """
    PLATFORM_NAME = "mercadolibre"
    BASE_URL = "https://api.mercadolibre.com"

    MAX_PAGE_SIZE = 50

    # ========== Seller ==========

    async def get_user_id(self) -> Any:
        """/users/me -> id of the authenticated seller"""
        data = await self.get_me()
        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise PlatformAPIError("Mercado Libre /users/me returned no seller id", payload=data)
        return user_id

    async def get_me(self) -> Dict[str, Any]:
        return await self._get("/users/me")

    # ========== Orders ==========

    async def search_orders(
        self,
        seller_id: Any,
        time_from: datetime,
        time_to: datetime,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """
        Orders by creation date, newest first
        API: /orders/search
        Returns: {orders: List[Dict], total: int, offset, limit}
        """
        params = {
            "seller": str(seller_id),
            "order.date_created.from": time_from.isoformat(timespec="milliseconds"),
            "order.date_created.to": time_to.isoformat(timespec="milliseconds"),
            "sort": "date_desc",
            "limit": min(max(limit, 1), self.MAX_PAGE_SIZE),
            "offset": max(offset, 0),
        }
        data = await self._get("/orders/search", params=params)
        paging = data.get("paging") or {}
        return {
            "orders": data.get("results") or [],
            "total": paging.get("total", 0),
            "offset": params["offset"],
            "limit": params["limit"],
        }

    async def get_order(self, order_id: Any) -> Dict[str, Any]:
        return await self._get(f"/orders/{order_id}")

    async def get_order_payments(self, order_id: Any) -> List[Dict[str, Any]]:
        data = await self._get(f"/orders/{order_id}/payments")
        if isinstance(data, dict):
            # some accounts get {"results": [...]} instead of a bare list
            return data.get("results") or []
        return data or []

    # ========== Shipping ==========

    async def get_shipment(self, shipment_id: Any) -> Dict[str, Any]:
        return await self._get_object(f"/shipments/{shipment_id}")

    @staticmethod
    def shipment_id_of(order: Dict[str, Any]) -> Optional[Any]:
        shipping_id = (order.get("shipping") or {}).get("id")
        if shipping_id:
            return shipping_id
        items = order.get("order_items") or []
        if items:
            return (items[0].get("shipping") or {}).get("id")
        return None
