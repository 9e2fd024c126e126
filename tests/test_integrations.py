"""Tests for the Mercado Libre, Mercado Pago and Google Sheets clients (mocked HTTP)."""
import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from salesgrid.integrations import (
    GoogleSheetsClient,
    MercadoLibreClient,
    MercadoPagoClient,
    PlatformAPIError,
    tax_from_charges,
)


def mock_transport(handler, seen=None):
    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)
    return httpx.MockTransport(_handler)


def json_response(data, status_code=200):
    return httpx.Response(status_code, content=json.dumps(data), headers={"Content-Type": "application/json"})


class TestMercadoLibreClient:

    def test_search_orders(self):
        seen = []
        transport = mock_transport(
            lambda r: json_response({"results": [{"id": 1}, {"id": 2}], "paging": {"total": 2}}),
            seen,
        )
        client = MercadoLibreClient("tok", transport=transport)
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        end = datetime(2025, 1, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)

        page = asyncio.run(client.search_orders(123, start, end, limit=500, offset=50))

        assert page == {"orders": [{"id": 1}, {"id": 2}], "total": 2, "offset": 50, "limit": 50}
        request = seen[0]
        assert request.url.path == "/orders/search"
        assert request.url.params["seller"] == "123"
        assert request.url.params["order.date_created.from"] == "2025-01-01T00:00:00.000+00:00"
        assert request.url.params["order.date_created.to"] == "2025-01-31T23:59:59.999+00:00"
        assert request.url.params["sort"] == "date_desc"
        assert request.headers["Authorization"] == "Bearer tok"

    def test_user_id(self):
        client = MercadoLibreClient("tok", transport=mock_transport(lambda r: json_response({"id": 777})))
        assert asyncio.run(client.get_user_id()) == 777

    def test_user_id_missing(self):
        client = MercadoLibreClient("tok", transport=mock_transport(lambda r: json_response({})))
        with pytest.raises(PlatformAPIError):
            asyncio.run(client.get_user_id())

    def test_error_status_is_kept(self):
        transport = mock_transport(lambda r: json_response({"message": "forbidden"}, status_code=403))
        client = MercadoLibreClient("tok", transport=transport)

        with pytest.raises(PlatformAPIError) as exc_info:
            asyncio.run(client.get_order_payments(1))

        assert exc_info.value.status_code == 403
        assert "forbidden" in str(exc_info.value)

    def test_non_json_success_body(self):
        transport = mock_transport(lambda r: httpx.Response(200, content=b"<html>maintenance</html>"))
        client = MercadoLibreClient("tok", transport=transport)

        with pytest.raises(PlatformAPIError) as exc_info:
            asyncio.run(client.get_shipment(1))
        assert exc_info.value.payload == "<html>maintenance</html>"

    def test_transport_failure(self):
        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        client = MercadoLibreClient("tok", transport=mock_transport(boom))
        with pytest.raises(PlatformAPIError) as exc_info:
            asyncio.run(client.get_shipment(1))
        assert exc_info.value.status_code is None

    @pytest.mark.parametrize("body", [[{"id": 1}], {"results": [{"id": 1}]}])
    def test_payments_payload_shapes(self, body):
        client = MercadoLibreClient("tok", transport=mock_transport(lambda r: json_response(body)))
        assert asyncio.run(client.get_order_payments(1)) == [{"id": 1}]

    def test_shipment_id_of(self):
        assert MercadoLibreClient.shipment_id_of({"shipping": {"id": 5}}) == 5
        assert MercadoLibreClient.shipment_id_of({"order_items": [{"shipping": {"id": 6}}]}) == 6
        assert MercadoLibreClient.shipment_id_of({"shipping": {}}) is None


class TestMercadoPagoClient:

    def test_tax_from_charges(self):
        detail = {"charges_details": [
            {"type": "tax", "amounts": {"original": 10.5}},
            {"type": "fee", "amounts": {"original": 99}},
            {"type": "tax", "amount": 2},
        ]}
        assert tax_from_charges(detail) == 12.5

    def test_compute_taxes_skips_failed_payment(self):
        def handler(request):
            if request.url.path.endswith("/2"):
                return json_response({"message": "not found"}, status_code=404)
            return json_response({"charges_details": [{"type": "tax", "amounts": {"original": 7.5}}]})

        client = MercadoPagoClient("mp-tok", transport=mock_transport(handler))
        total = asyncio.run(client.compute_taxes([{"id": 1}, {"id": 2}, {"id": 3}, {}]))
        assert total == 15

    def test_compute_taxes_without_token(self):
        client = MercadoPagoClient(None, transport=mock_transport(lambda r: json_response({})))
        assert asyncio.run(client.compute_taxes([{"id": 1}])) is None

    def test_compute_taxes_all_lookups_failed(self):
        transport = mock_transport(lambda r: json_response({"message": "internal"}, status_code=500))
        client = MercadoPagoClient("mp-tok", transport=transport)
        assert asyncio.run(client.compute_taxes([{"id": 1}, {"id": 2}])) is None

    def test_compute_taxes_without_payment_ids(self):
        client = MercadoPagoClient("mp-tok", transport=mock_transport(lambda r: json_response({})))
        assert asyncio.run(client.compute_taxes([{}, {"id": None}])) is None

    def test_payment_must_be_an_object(self):
        client = MercadoPagoClient("mp-tok", transport=mock_transport(lambda r: json_response([1, 2])))
        with pytest.raises(PlatformAPIError):
            asyncio.run(client.get_payment(1))


class TestGoogleSheetsClient:

    def test_read_cell_with_api_key(self):
        seen = []
        transport = mock_transport(lambda r: json_response({"values": [["  APP_USR-123  "]]}), seen)
        client = GoogleSheetsClient("sheet-1", api_key="key-1", transport=transport)

        assert asyncio.run(client.read_cell("Tokens", "A2")) == "APP_USR-123"
        request = seen[0]
        assert "/spreadsheets/sheet-1/values/" in str(request.url)
        assert "Tokens" in str(request.url)
        assert request.url.params["key"] == "key-1"
        assert "Authorization" not in request.headers

    def test_empty_range(self):
        client = GoogleSheetsClient("sheet-1", access_token="oauth", transport=mock_transport(lambda r: json_response({})))
        assert asyncio.run(client.get_values("Comparador!A:M")) == []
        assert asyncio.run(client.read_cell("Tokens", "A2")) == ""

    def test_requires_sheet_id(self):
        client = GoogleSheetsClient(None, api_key="key-1")
        with pytest.raises(PlatformAPIError):
            asyncio.run(client.get_values("Tokens!A2"))

    def test_requires_credentials(self):
        client = GoogleSheetsClient("sheet-1")
        with pytest.raises(PlatformAPIError):
            asyncio.run(client.get_values("Tokens!A2"))
