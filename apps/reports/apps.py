"""
Reports app configuration for NACK POS.
"""
from django.apps import AppConfig


class ReportsConfig(AppConfig):
    """Sales statistics and exports."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.reports'
    verbose_name = 'Reports'
