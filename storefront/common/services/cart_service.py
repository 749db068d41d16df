"""Cart pricing.

Carts are immutable values owned by the caller. Every operation returns a
new :class:`Cart`, so there is no shared cart state anywhere in the process.
"""

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from ..models.cart import Cart, CartLine, EMPTY_CART
from ..models.product import Product, ProductId, parse_product_id
from ..utils.validators import ensure_number


_PER_THOUSAND = Decimal(1000)


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def normalize_weight(product: Product, weight: Any) -> float:
    """Snap ``weight`` onto ``min_weight + k * step``.

    Values below the minimum are raised to it; others go to the nearest step,
    and an exact half step rounds up.
    """

    value = _dec(ensure_number(weight, "weight"))
    minimum = _dec(product.min_weight)
    step = _dec(product.step)
    if value <= minimum:
        return float(minimum)
    steps = ((value - minimum) / step).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(minimum + steps * step)


def _quantity(amount: Any) -> int:
    value = ensure_number(amount, "quantity")
    if value != int(value):
        raise ValueError("quantity must be a whole number")
    return int(value)


def add_or_update(cart: Cart, product: Product, amount: Optional[Any] = None) -> Cart:
    """Set the amount for ``product``, adding a line when there is none.

    A new line defaults to 1 (counted) or the product minimum (weighted).
    Passing ``None`` for a product already in the cart leaves it unchanged.
    A counted quantity of zero or less removes the line.
    """

    if not product.available:
        raise ValueError(f"product {product.id} is not available")

    existing = cart.find(product.id)
    if amount is None and existing is not None:
        return cart

    if product.is_weighted:
        weight = product.min_weight if amount is None else normalize_weight(product, amount)
        if existing is not None:
            return _replace_line(cart, replace(existing, weight=weight))
        return Cart(cart.lines + (_new_line(product, weight=weight),))

    quantity = 1 if amount is None else _quantity(amount)
    if quantity <= 0:
        return remove(cart, product.id)
    if existing is not None:
        return _replace_line(cart, replace(existing, quantity=quantity))
    return Cart(cart.lines + (_new_line(product, quantity=quantity),))


def remove(cart: Cart, product_id: ProductId) -> Cart:
    """Drop the line for ``product_id``; missing ids are ignored."""

    kept = tuple(line for line in cart.lines if line.product_id != product_id)
    if len(kept) == len(cart.lines):
        return cart
    return Cart(kept)


def clear(cart: Cart) -> Cart:
    return EMPTY_CART


def line_price(line: CartLine) -> float:
    return float(_line_price(line))


def total(cart: Cart) -> float:
    return float(sum((_line_price(line) for line in cart.lines), Decimal(0)))


def line_count(cart: Cart) -> int:
    return len(cart.lines)


def item_count(cart: Cart) -> int:
    # a weighed line is one item regardless of grams
    return sum(1 if line.is_weighted else line.quantity for line in cart.lines)


def from_payload(lines: Iterable[Mapping[str, Any]], products: Mapping[ProductId, Product]) -> Cart:
    """Build a cart from JSON lines such as ``{"productId": 2, "weight": 130}``."""

    cart = EMPTY_CART
    for raw in lines:
        if not isinstance(raw, Mapping):
            raise ValueError("each cart line must be an object")
        pid = parse_product_id(raw.get("productId", raw.get("id")))
        product = products.get(pid)
        if product is None:
            raise LookupError(f"product {pid} not found")
        amount = raw.get("weight") if product.is_weighted else raw.get("quantity")
        cart = add_or_update(cart, product, amount)
    return cart


def describe(cart: Cart) -> Dict[str, Any]:
    return {
        "lines": [dict(line.to_dict(), lineTotal=line_price(line)) for line in cart.lines],
        "total": total(cart),
        "lineCount": line_count(cart),
        "itemCount": item_count(cart),
    }


def _line_price(line: CartLine) -> Decimal:
    if line.is_weighted:
        return _dec(line.unit_price) * _dec(line.weight) / _PER_THOUSAND
    return _dec(line.unit_price) * Decimal(line.quantity)


def _new_line(product: Product, *, quantity: int = 0, weight: Optional[float] = None) -> CartLine:
    return CartLine(
        product_id=product.id,
        name=product.name,
        unit=product.unit,
        unit_price=product.price,
        quantity=quantity,
        weight=weight,
    )


def _replace_line(cart: Cart, updated: CartLine) -> Cart:
    return Cart(tuple(updated if line.product_id == updated.product_id else line for line in cart.lines))
