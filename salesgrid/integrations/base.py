"""
Base API Client - shared plumbing for the outbound REST integrations
"""
from typing import Optional, Dict, Any
import httpx
import logging

logger = logging.getLogger(__name__)


class PlatformAPIError(Exception):
    """Outbound call failed (transport error or non-2xx response)"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class BaseAPIClient:
    """
    Thin async REST client. A fresh httpx.AsyncClient is opened per call;
    `transport` can be injected (httpx.MockTransport in tests).
    """
    PLATFORM_NAME: str = "base"
    BASE_URL: str = ""

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def set_token(self, access_token: Optional[str]) -> None:
        self.access_token = access_token or None

    # ========== Utilities ==========

    def _build_headers(self) -> Dict[str, str]:
        """Build common request headers"""
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _log_api_call(self, method: str, endpoint: str, status_code: int):
        """Log API call for debugging"""
        logger.info(f"[{self.PLATFORM_NAME}] {method} {endpoint} -> {status_code}")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(path, params=params, headers=self._build_headers())
        except httpx.HTTPError as e:
            raise PlatformAPIError(f"{self.PLATFORM_NAME} request failed: GET {path}: {e}") from e

        self._log_api_call("GET", path, response.status_code)

        try:
            data = response.json()
        except ValueError:
            if not response.is_error:
                raise PlatformAPIError(
                    f"{self.PLATFORM_NAME} API Error: GET {path} -> {response.status_code}: body is not JSON",
                    status_code=response.status_code,
                    payload=response.text,
                )
            data = response.text

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            raise PlatformAPIError(
                f"{self.PLATFORM_NAME} API Error: GET {path} -> {response.status_code}"
                + (f": {message}" if message else ""),
                status_code=response.status_code,
                payload=data,
            )

        return data

    async def _get_object(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET for endpoints that return a single JSON object"""
        data = await self._get(path, params=params)
        if not isinstance(data, dict):
            raise PlatformAPIError(
                f"{self.PLATFORM_NAME} API Error: GET {path}: expected an object, got {type(data).__name__}",
                payload=data,
            )
        return data
