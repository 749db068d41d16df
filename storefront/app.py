"""Storefront Flask application."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify

from .common.services.catalog_service import CatalogService
from .common.services.logging import setup_logging
from .common.services.order_service import OrderService
from .config import StorefrontConfig
from .routes import api
from .services import CategoryRepository, JsonStore, OrderRepository, ProductRepository, UserRepository


logger = logging.getLogger(__name__)


def create_app(config: Optional[StorefrontConfig] = None) -> Flask:
    config = config or StorefrontConfig.load()
    setup_logging(config.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STOREFRONT_CONFIG"] = config
    app.json.sort_keys = False

    store = JsonStore(config.data_dir)
    product_repo = ProductRepository(store)
    category_repo = CategoryRepository(store)
    components = {
        "product_repo": product_repo,
        "catalog_service": CatalogService(product_repo, category_repo),
        "order_service": OrderService(
            OrderRepository(store),
            UserRepository(store),
            verify_total=config.verify_order_total,
        ),
    }
    app.extensions["storefront_components"] = components

    app.register_blueprint(api.api_bp)

    @app.errorhandler(404)
    def not_found(_exc):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_exc):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(_exc):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500

    logger.info("storefront data directory: %s", config.data_dir)
    return app


def main() -> None:
    config = StorefrontConfig.load()
    app = create_app(config)
    logger.info("Server running on http://%s:%s (API under /api)", config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False)


if __name__ == "__main__":
    main()
