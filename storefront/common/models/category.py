from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional


def slugify(name: str) -> str:
    slug = re.sub(r"[^\w]+", "-", name.strip().lower(), flags=re.UNICODE).strip("-")
    return slug or "category"


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    slug: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        name = str(data.get("name", ""))
        return cls(
            id=int(data.get("id", 0)),
            name=name,
            slug=str(data.get("slug") or slugify(name)),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "slug": self.slug, "description": self.description}
