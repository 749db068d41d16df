from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


ORDER_ID_PREFIX = "ORDER-"
STATUS_PENDING = "pending"


@dataclass
class Order:
    """A persisted order. ``products`` is a snapshot, detached from the catalog."""

    id: str
    products: List[Dict[str, Any]]
    total: float
    user: Optional[Dict[str, Any]]
    status: str = STATUS_PENDING
    created_at: str = ""
    updated_at: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        known = {"id", "products", "total", "user", "status", "createdAt", "updatedAt"}
        return cls(
            id=str(data.get("id", "")),
            products=copy.deepcopy(list(data.get("products") or [])),
            total=data.get("total", 0),
            user=copy.deepcopy(data.get("user")),
            status=str(data.get("status", STATUS_PENDING)),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "products": copy.deepcopy(self.products),
                "total": self.total,
                "user": copy.deepcopy(self.user),
                "status": self.status,
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )
        return data
