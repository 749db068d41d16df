from typing import Any, Dict, List, Optional

from ...services.category_repository import CategoryRepository
from ...services.product_repository import ProductRepository
from ..models.category import Category
from ..models.product import Product
from ..utils.validators import is_number
from .logging import log_event


def _check_price(price: Any) -> None:
    if not is_number(price) or price < 0:
        raise ValueError("Product price must be a non-negative number")


class CatalogService:
    """Catalog querying and admin edits.

    Responsibilities:
    - List/search products with an optional category filter
    - Get single product detail
    - Apply admin edits to products and categories, emitting an event per change
    """

    def __init__(self, products: ProductRepository, categories: CategoryRepository):
        self._products = products
        self._categories = categories

    def list_products(
        self,
        *,
        query: Optional[str] = None,
        category: Optional[str] = None,
        available_only: bool = False,
    ) -> List[Product]:
        items = self._products.list_products(category=category or None)
        if available_only:
            items = [p for p in items if p.available]
        if query:
            needle = query.strip().lower()
            items = [p for p in items if needle in p.name.lower() or needle in p.description.lower()]
        return items

    def get_product(self, product_id: Any) -> Optional[Product]:
        return self._products.get_product(product_id)

    def create_product(self, data: Dict[str, Any]) -> Product:
        if not str(data.get("name") or "").strip():
            raise ValueError("Product name is required")
        if "price" not in data:
            raise ValueError("Product price is required")
        _check_price(data["price"])
        product = self._products.add_product(data)
        log_event("info", "product.created", product_id=product.id)
        return product

    def update_product(self, product_id: Any, changes: Dict[str, Any]) -> Optional[Product]:
        if "price" in changes:
            _check_price(changes["price"])
        product = self._products.update_product(product_id, changes)
        if product is not None:
            log_event("info", "product.updated", product_id=product.id, fields=sorted(changes))
        return product

    def delete_product(self, product_id: Any) -> bool:
        removed = self._products.delete_product(product_id)
        if removed:
            log_event("info", "product.deleted", product_id=product_id)
        return removed

    def list_categories(self) -> List[Category]:
        return self._categories.list_categories()

    def create_category(self, data: Dict[str, Any]) -> Category:
        category = self._categories.add_category(
            name=str(data.get("name") or ""),
            slug=data.get("slug"),
            description=data.get("description"),
        )
        log_event("info", "category.created", category_id=category.id, slug=category.slug)
        return category
