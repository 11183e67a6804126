"""
Barcode lookup client and route tests. HTTP is served by httpx.MockTransport.
"""

import json

import httpx
import pytest

from inventory_tracker.errors import BarcodeLookupError
from inventory_tracker.services.upc_service import BarcodeClient, BarcodeResult


LOOKUP_URL = "https://upc.example.test/lookup"


def client_for(handler, url=LOOKUP_URL):
    return BarcodeClient(url=url, token="secret", transport=httpx.MockTransport(handler))


class TestBarcodeClient:
    def test_parses_product(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["method"] = request.method
            return httpx.Response(200, json={
                "product": {
                    "name": "Cordless Drill",
                    "category": {"name": "Power Tools"},
                    "image_url": "https://img.example.test/drill.png",
                },
            })

        result = client_for(handler).lookup("012345678905")

        assert result == BarcodeResult(
            id="012345678905",
            name="Cordless Drill",
            category="Power Tools",
            picture_url="https://img.example.test/drill.png",
        )
        assert seen == {"method": "POST", "body": {"barcode_number": "012345678905", "token": "secret"}}

    def test_missing_fields_become_blank(self):
        result = client_for(lambda request: httpx.Response(200, json={"product": None})).lookup("1")
        assert result.to_dict() == {"id": "1", "name": "", "category": "", "picture_url": ""}

    def test_http_error_status(self):
        with pytest.raises(BarcodeLookupError):
            client_for(lambda request: httpx.Response(503)).lookup("1")

    def test_invalid_json(self):
        with pytest.raises(BarcodeLookupError):
            client_for(lambda request: httpx.Response(200, content=b"<html>")).lookup("1")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BarcodeLookupError):
            client_for(handler).lookup("1")

    def test_not_configured(self):
        with pytest.raises(BarcodeLookupError, match="not configured"):
            BarcodeClient(url="", token="").lookup("1")


class TestLookupRoute:
    def test_requires_auth(self, client):
        assert client.get("/api/lookup?barcode=1").status_code == 401

    def test_returns_suggested_fields(self, client, services, user_headers, monkeypatch):
        fake = client_for(lambda request: httpx.Response(200, json={
            "product": {"name": "Hammer", "category": {"name": "Hand Tools"}, "image_url": ""},
        }))
        monkeypatch.setattr(services, "barcodes", fake)

        response = client.get("/api/lookup?barcode=42", headers=user_headers)

        assert response.status_code == 200
        assert response.get_json() == {"id": "42", "name": "Hammer", "category": "Hand Tools", "picture_url": ""}

    def test_unconfigured_lookup_is_internal_error(self, client, user_headers):
        response = client.get("/api/lookup?barcode=42", headers=user_headers)

        assert response.status_code == 500
        assert response.get_json() == {"code": 1000, "details": "barcode lookup is not configured"}

    def test_missing_barcode_param(self, client, user_headers):
        assert client.get("/api/lookup", headers=user_headers).status_code == 400
