"""
Orders app configuration for NACK POS.
"""
from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """Table orders and sales."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.orders'
    verbose_name = 'Orders'
