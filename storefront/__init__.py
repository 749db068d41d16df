"""Storefront: JSON-file backed shop API with cart pricing."""

__version__ = "0.1.0"
