"""
Billing app configuration for NACK POS.
"""
from django.apps import AppConfig


class BillingConfig(AppConfig):
    """Trial, subscription, credits and payment gateway."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.billing'
    verbose_name = 'Billing'
