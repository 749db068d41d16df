"""JSON API for the storefront."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from ..common.services import cart_service, view_model
from ..common.services.order_service import OrderPersistenceError, OrderValidationError
from ..common.utils.pagination import normalize_paging, total_pages
from ..services.json_store import StoreError


api_bp = Blueprint("storefront_api", __name__, url_prefix="/api")
logger = logging.getLogger(__name__)


def _components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@api_bp.errorhandler(StoreError)
@api_bp.errorhandler(OSError)
def storage_failure(exc: Exception):
    logger.error("storage failure on %s %s", request.method, request.path, exc_info=exc)
    return jsonify({"error": "Internal server error"}), 500


# --- Products ---

@api_bp.get("/products")
def list_products():
    catalog = _components()["catalog_service"]
    products = catalog.list_products(
        query=request.args.get("q"),
        category=request.args.get("category"),
        available_only=request.args.get("available") == "1",
    )
    return jsonify([p.to_dict() for p in products])


@api_bp.get("/products/<product_id>")
def get_product(product_id: str):
    product = _components()["catalog_service"].get_product(product_id)
    if product is None:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict())


@api_bp.post("/products")
def create_product():
    try:
        product = _components()["catalog_service"].create_product(_json_body())
    except (TypeError, ValueError) as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"success": True, "product": product.to_dict()}), 201


@api_bp.put("/products/<product_id>")
def update_product(product_id: str):
    try:
        product = _components()["catalog_service"].update_product(product_id, _json_body())
    except (TypeError, ValueError) as exc:
        return jsonify({"error": str(exc)}), 400
    if product is None:
        return jsonify({"error": "Product not found"}), 404
    return jsonify({"success": True, "product": product.to_dict()})


@api_bp.delete("/products/<product_id>")
def delete_product(product_id: str):
    if not _components()["catalog_service"].delete_product(product_id):
        return jsonify({"error": "Product not found"}), 404
    return jsonify({"success": True})


# --- Categories ---

@api_bp.get("/categories")
def list_categories():
    categories = _components()["catalog_service"].list_categories()
    return jsonify([c.to_dict() for c in categories])


@api_bp.post("/categories")
def create_category():
    try:
        category = _components()["catalog_service"].create_category(_json_body())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"success": True, "category": category.to_dict()}), 201


# --- Cart ---

@api_bp.post("/cart/quote")
def quote_cart():
    """Price a cart held by the client, snapping weights onto their steps."""

    lines = _json_body().get("lines")
    if not isinstance(lines, list):
        return jsonify({"error": "Invalid cart lines"}), 400
    products = _components()["product_repo"].products_by_id()
    try:
        cart = cart_service.from_payload(lines, products)
    except LookupError as exc:
        return jsonify({"error": str(exc)}), 404
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    quote = cart_service.describe(cart)
    quote["summary"] = view_model.cart_summary(cart, current_app.config["STOREFRONT_CONFIG"].currency)
    return jsonify(quote)


# --- Orders ---

@api_bp.get("/orders")
def list_orders():
    service = _components()["order_service"]
    if "page" not in request.args and "per_page" not in request.args:
        orders, _ = service.list_orders()
        return jsonify([o.to_dict() for o in orders])

    page, per_page = normalize_paging(
        request.args.get("page", type=int), request.args.get("per_page", type=int)
    )
    orders, total = service.list_orders(page, per_page)
    return jsonify(
        {
            "orders": [o.to_dict() for o in orders],
            "total": total,
            "page": page,
            "per_page": per_page,
            "total_pages": total_pages(total, per_page),
        }
    )


@api_bp.get("/orders/<order_id>")
def get_order(order_id: str):
    order = _components()["order_service"].get_order(order_id)
    if order is None:
        return jsonify({"error": "Order not found"}), 404
    return jsonify(order.to_dict())


@api_bp.post("/orders")
def create_order():
    payload = _json_body()
    service = _components()["order_service"]
    try:
        order = service.submit_payload(payload.get("products"), payload.get("total"), payload.get("user"))
    except OrderValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except OrderPersistenceError:
        return jsonify({"error": "Failed to create order"}), 500

    logger.info("New order created: %s", order.id)
    return jsonify({"success": True, "orderId": order.id, "message": "Order created successfully"})


@api_bp.get("/health")
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return jsonify({"status": "OK", "timestamp": timestamp})
