"""Category storage."""

from __future__ import annotations

from typing import List, Optional

from ..common.models.category import Category, slugify
from .json_store import JsonStore


COLLECTION = "categories"


class CategoryRepository:
    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def list_categories(self) -> List[Category]:
        return [Category.from_dict(item) for item in self._store.read_all(COLLECTION)]

    def add_category(self, *, name: str, slug: Optional[str] = None, description: Optional[str] = None) -> Category:
        name = name.strip()
        if not name:
            raise ValueError("category name is required")
        with self._store.update(COLLECTION) as entries:
            category = Category(
                id=max((int(e.get("id", 0)) for e in entries), default=0) + 1,
                name=name,
                slug=(slug or "").strip() or slugify(name),
                description=description,
            )
            if any(e.get("slug") == category.slug for e in entries):
                raise ValueError(f"category slug {category.slug!r} already exists")
            entries.append(category.to_dict())
        return category
