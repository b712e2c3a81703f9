"""Coffee shop service: menu, inventory, orders and sales reports kept in JSON files and served over a JSON HTTP API."""

__version__ = "0.1.0"
__all__ = ["__version__"]