"""Storage layer: JSON collections and their repositories."""

from .category_repository import CategoryRepository
from .json_store import JsonStore, StoreError
from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "CategoryRepository",
    "JsonStore",
    "StoreError",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
