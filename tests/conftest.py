import json
from datetime import datetime, timezone

import pytest

from storefront.app import create_app
from storefront.common.models.product import Product
from storefront.config import StorefrontConfig
from storefront.services import JsonStore


APPLES = {"id": 1, "name": "Apples", "price": 100, "unit": "count", "category": "fruit"}
CHEESE = {"id": 2, "name": "Cheese", "price": 200, "unit": "g", "minWeight": 100, "step": 50, "category": "dairy"}
MILK = {"id": "farm-milk", "name": "Farm milk", "price": 90, "unit": "ml", "minWeight": 500, "step": 250}
TRUFFLE = {"id": 4, "name": "Truffle", "price": 9000, "unit": "count", "available": False}

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path):
    return StorefrontConfig(
        secret_key="test",
        data_dir=tmp_path,
        host="127.0.0.1",
        port=0,
        log_level="WARNING",
        currency="RUB",
    )


@pytest.fixture
def seeded(config):
    (config.data_dir / "products.json").write_text(
        json.dumps([APPLES, CHEESE, MILK, TRUFFLE]), encoding="utf-8"
    )
    return config


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path)


@pytest.fixture
def app(seeded):
    app = create_app(seeded)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def apples():
    return Product.from_dict(APPLES)


@pytest.fixture
def cheese():
    return Product.from_dict(CHEESE)


@pytest.fixture
def milk():
    return Product.from_dict(MILK)


@pytest.fixture
def truffle():
    return Product.from_dict(TRUFFLE)
