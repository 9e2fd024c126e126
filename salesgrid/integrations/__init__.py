# Outbound Integrations Package
from .base import BaseAPIClient, PlatformAPIError
from .mercadolibre import MercadoLibreClient
from .mercadopago import MercadoPagoClient, tax_from_charges
from .sheets import GoogleSheetsClient

__all__ = [
    "BaseAPIClient",
    "PlatformAPIError",
    "MercadoLibreClient",
    "MercadoPagoClient",
    "tax_from_charges",
    "GoogleSheetsClient",
]
