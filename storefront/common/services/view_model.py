from typing import Any, Dict, List

from ..models.cart import Cart
from ..models.product import UNIT_GRAM, UNIT_MILLILITER, Product
from . import cart_service


_PRICE_UNIT_LABELS = {UNIT_GRAM: "kg", UNIT_MILLILITER: "l"}
_AMOUNT_UNIT_LABELS = {UNIT_GRAM: "g", UNIT_MILLILITER: "ml"}


def format_money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def price_label(product: Product, currency: str) -> str:
    label = format_money(product.price, currency)
    per = _PRICE_UNIT_LABELS.get(product.unit)
    return f"{label} / {per}" if per else label


def amount_label(unit: str, amount: float) -> str:
    suffix = _AMOUNT_UNIT_LABELS.get(unit)
    if suffix:
        return f"{amount:g} {suffix}"
    return f"× {int(amount)}"


def product_card(product: Product, cart: Cart, currency: str) -> Dict[str, Any]:
    line = cart.find(product.id)
    card = {
        "id": product.id,
        "title": product.name or "Product",
        "description": product.description[:120],
        "image": product.image,
        "priceLabel": price_label(product, currency),
        "available": product.available,
        "inCart": line is not None,
        "amountLabel": None,
        "lineTotalLabel": None,
    }
    if product.is_weighted:
        card["weightOptions"] = {"min": product.min_weight, "step": product.step}
    if line is not None:
        card["amountLabel"] = amount_label(line.unit, line.amount)
        card["lineTotalLabel"] = format_money(cart_service.line_price(line), currency)
    return card


def cart_summary(cart: Cart, currency: str) -> Dict[str, Any]:
    rows: List[Dict[str, Any]] = [
        {
            "id": line.product_id,
            "title": line.name,
            "amountLabel": amount_label(line.unit, line.amount),
            "totalLabel": format_money(cart_service.line_price(line), currency),
        }
        for line in cart.lines
    ]
    return {
        "rows": rows,
        "lineCount": cart_service.line_count(cart),
        "itemCount": cart_service.item_count(cart),
        "totalLabel": format_money(cart_service.total(cart), currency),
        "canCheckout": bool(rows) and cart_service.total(cart) > 0,
    }
