"""
Users app configuration for NACK POS.
"""
from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Owners and establishments."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.users'
    verbose_name = 'Users'
