"""
Events app configuration for NACK POS.
"""
from django.apps import AppConfig


class EventsConfig(AppConfig):
    """Events, tickets and door check-in."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.events'
    verbose_name = 'Events'
