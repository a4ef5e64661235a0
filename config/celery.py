"""
Celery configuration for NACK POS.
"""
import os
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

app = Celery('nack')

# Beat schedule lives in settings as CELERY_BEAT_SCHEDULE so that the
# replay interval follows the NACK settings of each environment.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()
