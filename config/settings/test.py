"""
Test settings for NACK POS.
"""
from .base import *

DEBUG = False
SECRET_KEY = 'test-nack-secret-key-long-enough-for-hs256-signing'
ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

MEDIA_ROOT = BASE_DIR / 'test_media'

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

LOGGING['loggers']['apps']['level'] = 'WARNING'

SINGPAY.update({
    'CLIENT_ID': 'test-client',
    'CLIENT_SECRET': 'test-secret',
    'WALLET': 'test-wallet',
    'DISBURSEMENT': 'test-disbursement',
})

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
