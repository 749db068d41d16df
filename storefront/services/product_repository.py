"""Product catalog storage."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..common.models.product import Product, ProductId, parse_product_id
from .json_store import JsonStore


COLLECTION = "products"


def _next_id(entries: List[Dict[str, Any]]) -> int:
    numeric = [e.get("id") for e in entries if isinstance(e.get("id"), int) and not isinstance(e.get("id"), bool)]
    return max(numeric, default=0) + 1


def _matches(entry: Dict[str, Any], product_id: ProductId) -> bool:
    try:
        return parse_product_id(entry.get("id")) == product_id
    except ValueError:
        return False


class ProductRepository:
    """CRUD over the products collection."""

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def list_products(self, *, category: Optional[str] = None) -> List[Product]:
        products = [Product.from_dict(item) for item in self._store.read_all(COLLECTION)]
        if category:
            products = [p for p in products if p.category == category]
        return products

    def get_product(self, product_id: Any) -> Optional[Product]:
        pid = parse_product_id(product_id)
        for product in self.list_products():
            if product.id == pid:
                return product
        return None

    def products_by_id(self) -> Dict[ProductId, Product]:
        return {p.id: p for p in self.list_products()}

    def add_product(self, data: Dict[str, Any]) -> Product:
        """Validate and append a product; an id is assigned when none is given."""

        with self._store.update(COLLECTION) as entries:
            payload = dict(data)
            if payload.get("id") in (None, ""):
                payload["id"] = _next_id(entries)
            product = Product.from_dict(payload)
            if any(_matches(e, product.id) for e in entries):
                raise ValueError(f"product {product.id} already exists")
            entries.append(product.to_dict())
        return product

    def update_product(self, product_id: Any, changes: Dict[str, Any]) -> Optional[Product]:
        pid = parse_product_id(product_id)
        with self._store.update(COLLECTION) as entries:
            for i, entry in enumerate(entries):
                if _matches(entry, pid):
                    updated = Product.from_dict(entry).with_changes(changes)
                    entries[i] = updated.to_dict()
                    return updated
        return None

    def delete_product(self, product_id: Any) -> bool:
        pid = parse_product_id(product_id)
        with self._store.update(COLLECTION) as entries:
            remaining = [e for e in entries if not _matches(e, pid)]
            removed = len(remaining) != len(entries)
            entries[:] = remaining
        return removed
