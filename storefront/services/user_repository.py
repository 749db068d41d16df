"""Customers seen at checkout."""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from .json_store import JsonStore


COLLECTION = "users"


class UserRepository:
    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def list_users(self) -> List[Dict[str, Any]]:
        return self._store.read_all(COLLECTION)

    def remember(self, user: Dict[str, Any], *, seen_at: str) -> Dict[str, Any]:
        """Insert or refresh a user keyed by ``id``; ``lastOrderAt`` is set to ``seen_at``."""

        if user.get("id") in (None, ""):
            raise ValueError("user id is required")
        record = copy.deepcopy(user)
        record["lastOrderAt"] = seen_at
        with self._store.update(COLLECTION) as users:
            for i, existing in enumerate(users):
                if str(existing.get("id")) == str(user["id"]):
                    merged = dict(existing)
                    merged.update(record)
                    merged["orderCount"] = int(existing.get("orderCount", 0)) + 1
                    users[i] = merged
                    return merged
            record["orderCount"] = 1
            users.append(record)
        return record
