"""
Team app configuration for NACK POS.
"""
from django.apps import AppConfig


class TeamConfig(AppConfig):
    """Staff members and their agent codes."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.team'
    verbose_name = 'Team'
