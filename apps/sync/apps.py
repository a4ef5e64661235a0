"""
Sync app configuration for NACK POS.
"""
from django.apps import AppConfig


class SyncConfig(AppConfig):
    """Replay of writes queued by offline clients."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.sync'
    verbose_name = 'Offline sync'
