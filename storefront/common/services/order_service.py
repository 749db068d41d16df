import copy
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...services.json_store import StoreError
from ...services.order_repository import OrderRepository
from ...services.user_repository import UserRepository
from ..models.cart import Cart
from ..models.order import ORDER_ID_PREFIX, STATUS_PENDING, Order
from ..models.product import WEIGHTED_UNITS
from ..utils.pagination import normalize_paging
from ..utils.validators import is_number
from . import cart_service
from .logging import log_event


logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = Decimal("0.01")


class OrderValidationError(ValueError):
    """The submitted order is malformed; maps to HTTP 400."""


class OrderPersistenceError(RuntimeError):
    """The order could not be stored; it was not created."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderService:
    """Order creation and retrieval backed by the JSON store."""

    def __init__(
        self,
        order_repo: OrderRepository,
        user_repo: Optional[UserRepository] = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        verify_total: bool = False,
    ):
        self._orders = order_repo
        self._users = user_repo
        self._clock = clock
        self._verify_total = verify_total

    def submit(self, cart: Cart, user: Optional[Dict[str, Any]]) -> Order:
        """Create an order from a cart. The total is computed here, never taken from the caller."""

        if not cart.lines:
            raise OrderValidationError("Cart is empty")
        amount = cart_service.total(cart)
        if amount <= 0:
            raise OrderValidationError("Invalid total amount")
        snapshot = [dict(line.to_dict(), lineTotal=cart_service.line_price(line)) for line in cart.lines]
        return self._persist(snapshot, amount, user)

    def submit_payload(self, products: Any, total: Any, user: Any) -> Order:
        """Create an order from a client payload ``{products, total, user}``."""

        if not isinstance(products, list) or not products or not all(isinstance(p, dict) for p in products):
            raise OrderValidationError("Invalid products data")
        if not is_number(total) or total <= 0:
            raise OrderValidationError("Invalid total amount")
        if user is not None and not isinstance(user, dict):
            raise OrderValidationError("Invalid user data")
        if self._verify_total:
            self._check_total(products, total)
        return self._persist(copy.deepcopy(products), total, user)

    def get_order(self, order_id: str) -> Optional[Order]:
        if not order_id:
            return None
        return self._orders.get_order(order_id)

    def list_orders(self, page: Optional[int] = None, per_page: Optional[int] = None) -> Tuple[List[Order], int]:
        """Return ``(orders, total)``; without paging arguments every order is returned."""

        total = self._orders.count_orders()
        if page is None and per_page is None:
            return self._orders.list_orders(), total
        p, ps = normalize_paging(page, per_page)
        return self._orders.list_orders(limit=ps, offset=(p - 1) * ps), total

    def _persist(self, products: List[Dict[str, Any]], total: Any, user: Optional[Dict[str, Any]]) -> Order:
        now = self._clock()
        stamp = _iso(now)

        def build(taken: set) -> Order:
            millis = int(now.timestamp() * 1000)
            while f"{ORDER_ID_PREFIX}{millis}" in taken:
                millis += 1
            return Order(
                id=f"{ORDER_ID_PREFIX}{millis}",
                products=products,
                total=total,
                user=copy.deepcopy(user),
                status=STATUS_PENDING,
                created_at=stamp,
                updated_at=stamp,
            )

        try:
            order = self._orders.append(build)
        except (OSError, StoreError) as exc:
            logger.exception("Error creating order")
            raise OrderPersistenceError("Failed to create order") from exc

        log_event("info", "order.created", order_id=order.id, items=len(products), total=total)
        self._remember_user(user, stamp)
        return order

    def _remember_user(self, user: Optional[Dict[str, Any]], stamp: str) -> None:
        if self._users is None or not user or user.get("id") in (None, ""):
            return
        try:
            self._users.remember(user, seen_at=stamp)
        except (OSError, StoreError):
            # the order is already stored; a stale users file is not worth failing it
            logger.warning("could not record user %s", user.get("id"), exc_info=True)

    @staticmethod
    def _check_total(products: List[Dict[str, Any]], total: Any) -> None:
        computed = Decimal(0)
        for line in products:
            price = line.get("price")
            weighted = line.get("unit") in WEIGHTED_UNITS or "weight" in line
            amount = line.get("weight") if weighted else line.get("quantity")
            if not is_number(price) or not is_number(amount):
                # lines without pricing data cannot be checked
                return
            line_total = Decimal(str(price)) * Decimal(str(amount))
            computed += line_total / 1000 if weighted else line_total
        if abs(computed - Decimal(str(total))) > TOTAL_TOLERANCE:
            raise OrderValidationError("Total does not match order lines")
