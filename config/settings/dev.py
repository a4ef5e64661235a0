"""
Development settings for NACK POS.
"""
from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

SECRET_KEY = SECRET_KEY or 'dev-insecure-nack-secret-key'

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Disable security features for development
SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# CORS - allow all origins in development
CORS_ALLOW_ALL_ORIGINS = True

INTERNAL_IPS = [
    '127.0.0.1',
    'localhost',
]

# Additional development apps
INSTALLED_APPS += [
    'django_extensions',
]

# Relaxed throttling for development
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'anon': '1000/hour',
    'user': '10000/hour'
}

# Less strict logging in development
LOGGING['loggers']['django']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# Replay queued work more often in dev
NACK.update({
    'OFFLINE_FLUSH_INTERVAL': 10,
})
CELERY_BEAT_SCHEDULE['flush-offline-queue']['schedule'] = 10.0

# Celery configuration for development
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
