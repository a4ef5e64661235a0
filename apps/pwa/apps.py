"""
PWA app configuration for NACK POS.
"""
from django.apps import AppConfig


class PwaConfig(AppConfig):
    """Manifest and service worker."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.pwa'
    verbose_name = 'PWA'
