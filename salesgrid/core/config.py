from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "SalesGrid"
    APP_PORT: int = 3000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_NETO: bool = False

    # Mercado Libre / Mercado Pago
    ML_API_URL: str = "https://api.mercadolibre.com"
    ML_ACCESS_TOKEN: Optional[str] = None  # overrides the token cell in the sheet
    MP_API_URL: str = "https://api.mercadopago.com"
    MP_ACCESS_TOKEN: Optional[str] = None
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Google Sheets (token cell + cost table)
    GS_API_URL: str = "https://sheets.googleapis.com/v4"
    GS_SHEET_ID: Optional[str] = None
    GS_API_KEY: Optional[str] = None
    GS_ACCESS_TOKEN: Optional[str] = None
    GS_TOKENS_SHEET: str = "Tokens"
    GS_TOKENS_CELL: str = "A2"
    GS_COSTS_SHEET: str = "Comparador"
    CACHE_TTL_SECONDS: int = 300

    # Shipping allocation
    FREE_SHIPPING_THRESHOLD: float = 33000.0
    FREE_SHIPPING_INCLUSIVE: bool = True
    FREE_SHIPPING_PRICE_FIELD: Literal["base", "final"] = "base"
    SHIPPING_SPLIT_POLICY: Literal["first", "even", "by_price"] = "by_price"

    # Report
    DATE_PIVOT_MODE: Literal["created", "paid", "both"] = "both"
    PAID_LOOKBACK_DAYS: int = 7
    TIMEZONE: str = "America/Argentina/Buenos_Aires"
    INCLUDE_PRICE_WITHOUT_INTEREST: bool = False
    PROFIT_MODE: Literal["percent", "absolute"] = "percent"
    MAX_CONCURRENCY: int = 5

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
