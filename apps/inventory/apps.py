"""
Inventory app configuration for NACK POS.
"""
from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """Products, stock and losses."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.inventory'
    verbose_name = 'Inventory'
