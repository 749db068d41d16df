from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .product import WEIGHTED_UNITS, ProductId


@dataclass(frozen=True)
class CartLine:
    """One product in a cart. Price fields are a snapshot taken when the line was added."""

    product_id: ProductId
    name: str
    unit: str
    unit_price: float
    quantity: int = 0
    weight: Optional[float] = None

    @property
    def is_weighted(self) -> bool:
        return self.unit in WEIGHTED_UNITS

    @property
    def amount(self) -> float:
        return self.weight if self.is_weighted else self.quantity

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.product_id,
            "name": self.name,
            "unit": self.unit,
            "price": self.unit_price,
        }
        if self.is_weighted:
            data["weight"] = self.weight
        else:
            data["quantity"] = self.quantity
        return data


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = ()

    def find(self, product_id: ProductId) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None


EMPTY_CART = Cart()

