"""Order storage."""

from __future__ import annotations

from typing import Callable, List, Optional

from ..common.models.order import Order
from .json_store import JsonStore


COLLECTION = "orders"


class OrderRepository:
    """Append-only access to the orders collection."""

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def list_orders(self, limit: Optional[int] = None, offset: int = 0) -> List[Order]:
        records = self._store.read_all(COLLECTION)
        if limit is not None:
            records = records[offset : offset + limit]
        else:
            records = records[offset:]
        return [Order.from_dict(r) for r in records]

    def count_orders(self) -> int:
        return len(self._store.read_all(COLLECTION))

    def get_order(self, order_id: str) -> Optional[Order]:
        for record in self._store.read_all(COLLECTION):
            if record.get("id") == order_id:
                return Order.from_dict(record)
        return None

    def append(self, build: Callable[[set], Order]) -> Order:
        """Append the order produced by ``build``.

        ``build`` receives the ids already in the collection and runs while
        the collection lock is held, so it can pick an id that is not taken.
        """

        with self._store.update(COLLECTION) as records:
            order = build({r.get("id") for r in records})
            records.append(order.to_dict())
        return order
