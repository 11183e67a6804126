# Overview: Barcode (UPC) lookup against the external product database.

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict

import httpx

from ..errors import BarcodeLookupError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

_REQUEST_HEADERS = {
    "user-agent": "Dalvik/2.1.0",
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
    "accept-language": "en-US,en;q=0.9",
}


@dataclass
class BarcodeResult:
    """Suggested fields for a new item. Nothing here is stored until the item is added."""

    id: str
    name: str
    category: str
    picture_url: str

    def to_dict(self) -> dict:
        return asdict(self)


class BarcodeClient:
    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config) -> "BarcodeClient":
        return cls(
            url=config.get("UPC_URL", ""),
            token=config.get("UPC_TOKEN", ""),
            timeout=config.get("UPC_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        )

    def lookup(self, barcode: str) -> BarcodeResult:
        if not self.url:
            raise BarcodeLookupError("barcode lookup is not configured")

        payload = {"barcode_number": barcode, "token": self.token}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload, headers=_REQUEST_HEADERS)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as exc:
            logger.error("Barcode lookup for %s failed: %s", barcode, exc)
            raise BarcodeLookupError(f"barcode lookup failed - {exc}") from exc
        except ValueError as exc:
            logger.error("Barcode lookup for %s returned invalid JSON", barcode)
            raise BarcodeLookupError("barcode lookup returned an invalid response") from exc

        product = body.get("product") if isinstance(body, dict) else None
        if not isinstance(product, dict):
            product = {}
        category = product.get("category")
        if not isinstance(category, dict):
            category = {}

        return BarcodeResult(
            id=barcode,
            name=product.get("name") or "",
            category=category.get("name") or "",
            picture_url=product.get("image_url") or "",
        )
