"""Inventory and order services for a small ERP system: models, stores and handlers."""

__version__ = "0.1.0"