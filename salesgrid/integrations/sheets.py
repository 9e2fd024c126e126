"""
Google Sheets Client - reads the Mercado Libre token cell and the cost table
API: https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
"""
from typing import Optional, Dict, Any, List
from urllib.parse import quote
import httpx
import logging

from .base import BaseAPIClient, PlatformAPIError

logger = logging.getLogger(__name__)


class GoogleSheetsClient(BaseAPIClient):
    """
    Read-only values client. Authenticates with an API key (sheet shared by
    link) or with an OAuth access token.
    """
    PLATFORM_NAME = "sheets"
    BASE_URL = "https://sheets.googleapis.com/v4"

    def __init__(
        self,
        spreadsheet_id: Optional[str],
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(access_token, base_url, timeout, transport)
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key

    async def get_values(self, range_a1: str) -> List[List[Any]]:
        if not self.spreadsheet_id:
            raise PlatformAPIError("GS_SHEET_ID is not configured")
        if not self.api_key and not self.access_token:
            raise PlatformAPIError("Set GS_API_KEY or GS_ACCESS_TOKEN to read the sheet")

        params: Dict[str, Any] = {}
        if self.api_key:
            params["key"] = self.api_key

        path = f"/spreadsheets/{self.spreadsheet_id}/values/{quote(range_a1, safe='')}"
        data = await self._get(path, params=params)
        return data.get("values") or []

    async def read_cell(self, sheet_name: str, cell: str) -> str:
        values = await self.get_values(f"{sheet_name}!{cell}")
        if values and values[0]:
            return str(values[0][0]).strip()
        return ""
