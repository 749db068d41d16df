"""Catalog product record."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Union


ProductId = Union[int, str]

UNIT_COUNT = "count"
UNIT_GRAM = "g"
UNIT_MILLILITER = "ml"
UNITS = (UNIT_COUNT, UNIT_GRAM, UNIT_MILLILITER)
# g / ml products are priced per 1000 base units
WEIGHTED_UNITS = (UNIT_GRAM, UNIT_MILLILITER)

DEFAULT_MIN_WEIGHT = 100.0
DEFAULT_STEP = 50.0

_KNOWN_KEYS = {"id", "name", "price", "unit", "minWeight", "step", "available", "category", "description", "image"}


def parse_product_id(value: Any) -> ProductId:
    """Numeric ids become ints, anything else stays a slug string."""

    if value is None or isinstance(value, bool):
        raise ValueError("product id must be an integer or slug")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("product id must not be empty")
    return int(text) if text.lstrip("-").isdecimal() else text


@dataclass(frozen=True)
class Product:
    id: ProductId
    name: str
    price: float
    unit: str = UNIT_COUNT
    min_weight: Optional[float] = None
    step: Optional[float] = None
    available: bool = True
    category: Optional[str] = None
    description: str = ""
    image: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_weighted(self) -> bool:
        return self.unit in WEIGHTED_UNITS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        if not isinstance(data, dict):
            raise TypeError("product record must be a JSON object")
        available = data.get("available", True)
        if not isinstance(available, bool):
            raise ValueError("available must be true or false")
        unit = str(data.get("unit") or UNIT_COUNT)
        if unit not in UNITS:
            raise ValueError(f"unknown unit: {unit}")
        min_weight = data.get("minWeight")
        step = data.get("step")
        if unit in WEIGHTED_UNITS:
            min_weight = float(min_weight) if min_weight is not None else DEFAULT_MIN_WEIGHT
            step = float(step) if step is not None else DEFAULT_STEP
            if min_weight <= 0 or step <= 0:
                raise ValueError("minWeight and step must be positive")
        return cls(
            id=parse_product_id(data.get("id")),
            name=str(data.get("name", "")),
            price=float(data.get("price", 0)),
            unit=unit,
            min_weight=min_weight,
            step=step,
            available=available,
            category=data.get("category"),
            description=str(data.get("description") or ""),
            image=data.get("image"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "price": self.price,
                "unit": self.unit,
                "available": self.available,
                "category": self.category,
                "description": self.description,
                "image": self.image,
            }
        )
        if self.is_weighted:
            data["minWeight"] = self.min_weight
            data["step"] = self.step
        return data

    def with_changes(self, changes: Dict[str, Any]) -> "Product":
        """Apply a partial JSON update; the id never changes."""

        merged = self.to_dict()
        merged.update({k: v for k, v in changes.items() if k != "id"})
        return replace(Product.from_dict(merged), id=self.id)
