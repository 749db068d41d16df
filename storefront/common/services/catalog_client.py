"""HTTP client for the storefront API, as used by a shop front end.

Failures are reported as values instead of being papered over: the catalog
call returns ``unavailable`` rather than mock data, and a failed order
submission never produces a locally invented order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from ..models.cart import Cart
from ..models.product import Product
from . import cart_service


logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"
STATUS_CONFIRMED = "confirmed"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class CatalogResult:
    status: str
    products: List[Product] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def products_or(self, fallback: List[Product]) -> List[Product]:
        """Return the fetched products, or ``fallback`` when the catalog was unavailable."""

        return self.products if self.ok else list(fallback)


@dataclass(frozen=True)
class SubmissionResult:
    status: str
    order_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        return self.status == STATUS_CONFIRMED


class StorefrontClient:
    """Talks to ``/api``. One attempt per call, no retries."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_catalog(self) -> CatalogResult:
        try:
            response = self._session.get(f"{self._base_url}/api/products", timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.warning("catalog unavailable: %s", exc)
            return CatalogResult(status=STATUS_UNAVAILABLE, reason=str(exc))
        except ValueError as exc:
            logger.warning("catalog response is not JSON: %s", exc)
            return CatalogResult(status=STATUS_UNAVAILABLE, reason="invalid response body")

        if not isinstance(payload, list):
            return CatalogResult(status=STATUS_UNAVAILABLE, reason="catalog must be a JSON array")
        try:
            products = [Product.from_dict(item) for item in payload]
        except (TypeError, ValueError) as exc:
            return CatalogResult(status=STATUS_UNAVAILABLE, reason=f"invalid product data: {exc}")
        return CatalogResult(status=STATUS_OK, products=products)

    def submit_order(self, cart: Cart, user: Optional[Dict[str, Any]] = None) -> SubmissionResult:
        body = {
            "products": [line.to_dict() for line in cart.lines],
            "total": cart_service.total(cart),
            "user": user,
        }
        try:
            response = self._session.post(f"{self._base_url}/api/orders", json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("order submission failed: %s", exc)
            return SubmissionResult(status=STATUS_FAILED, reason=str(exc))

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        if response.status_code >= 400 or not payload.get("success"):
            reason = payload.get("error") or f"HTTP {response.status_code}"
            return SubmissionResult(status=STATUS_FAILED, reason=reason)
        return SubmissionResult(status=STATUS_CONFIRMED, order_id=payload.get("orderId"))
