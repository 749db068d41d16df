"""Storefront application settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv


ALLOWED_HOT_KEYS = {"CURRENCY"}
_TRUTHY = {"1", "true", "yes", "on"}


def validate_currency(value: Optional[str]) -> str:
    v = (value or "RUB").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


@dataclass
class StorefrontConfig:
    """Settings for the storefront API."""

    secret_key: str
    data_dir: Path
    host: str
    port: int
    log_level: str
    currency: str
    verify_order_total: bool = False

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "StorefrontConfig":
        """Build settings from .env, the environment and settings.json, and make sure the data dir exists."""

        package_root = Path(__file__).resolve().parent
        load_dotenv(package_root.parent / ".env")

        if data_dir is None:
            data_dir = Path(os.environ.get("STOREFRONT_DATA_DIR", package_root / "data"))

        config = cls(
            secret_key=os.environ.get("STOREFRONT_SECRET_KEY", "storefront-dev"),
            data_dir=Path(data_dir),
            host=os.environ.get("STOREFRONT_HOST", "0.0.0.0"),
            port=int(os.environ.get("STOREFRONT_PORT", "3000")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            currency=validate_currency(os.environ.get("CURRENCY")),
            verify_order_total=_flag(os.environ.get("STOREFRONT_VERIFY_ORDER_TOTAL")),
        )
        config.data_dir.mkdir(parents=True, exist_ok=True)

        # settings.json wins over the environment for hot keys
        overrides = _load_settings_file(config.settings_file)
        if overrides:
            config = refresh_non_sensitive(overrides, config)
        return config


def _load_settings_file(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"settings file is not valid JSON: {path}") from exc
    return payload if isinstance(payload, dict) else {}


def refresh_non_sensitive(overrides: Dict[str, str], current: StorefrontConfig) -> StorefrontConfig:
    updates = {k: v for k, v in (overrides or {}).items() if k in ALLOWED_HOT_KEYS}
    currency = validate_currency(updates.get("CURRENCY", current.currency))
    return replace(current, currency=currency)

