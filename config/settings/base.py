"""
Base settings for NACK POS.
"""
from datetime import timedelta
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve().parent.parent.parent

env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, []),
    CORS_ALLOWED_ORIGINS=(list, []),
)
environ.Env.read_env(BASE_DIR / '.env')

SECRET_KEY = env('SECRET_KEY', default='')
DEBUG = env('DEBUG')
ALLOWED_HOSTS = env('ALLOWED_HOSTS')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'django_filters',
    'drf_spectacular',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.audit',
    'apps.users',
    'apps.billing',
    'apps.inventory',
    'apps.orders',
    'apps.events',
    'apps.team',
    'apps.reports',
    'apps.sync',
    'apps.pwa',
    'apps.api',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.locale.LocaleMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'apps.core.middleware.SecurityHeadersMiddleware',
    'apps.core.middleware.RequestLoggingMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

DATABASES = {
    'default': env.db('DATABASE_URL', default=f'sqlite:///{BASE_DIR / "db.sqlite3"}'),
}

REDIS_URL = env('REDIS_URL', default='')

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.redis.RedisCache',
            'LOCATION': REDIS_URL,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# Internationalization
LANGUAGE_CODE = 'fr'
LANGUAGES = [
    ('fr', 'Français'),
    ('en', 'English'),
]
TIME_ZONE = env('TIME_ZONE', default='Africa/Libreville')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# REST framework
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.api.authentication.JWTAuthentication',
        'apps.api.authentication.AgentCodeAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 50,
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': '100/hour',
        'user': '2000/hour',
    },
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'NACK POS API',
    'DESCRIPTION': 'Point of sale, stock, team and event ticketing for hospitality venues',
    'VERSION': '1.0.0',
}

# CORS
CORS_ALLOWED_ORIGINS = env('CORS_ALLOWED_ORIGINS')
CORS_ALLOW_HEADERS = [
    'accept',
    'authorization',
    'content-type',
    'x-agent-code',
    'x-csrftoken',
    'x-requested-with',
]

EMAIL_BACKEND = env('EMAIL_BACKEND', default='django.core.mail.backends.console.EmailBackend')

# Celery
CELERY_BROKER_URL = REDIS_URL or 'redis://localhost:6379/0'
CELERY_RESULT_BACKEND = REDIS_URL or 'redis://localhost:6379/0'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE

# Domain settings
NACK = {
    'TRIAL_DAYS': 7,
    'SUBSCRIPTION_DAYS': 30,
    'SUBSCRIPTION_PRICE': env.int('NACK_SUBSCRIPTION_PRICE', default=2500),
    'MEMBER_PRICE': 1000,
    'EVENT_PRICE': 2000,
    'WELCOME_EVENT_CREDITS': 2,
    'CURRENCY': 'XAF',
    'OFFLINE_FLUSH_INTERVAL': 30,
    'OFFLINE_FLUSH_LIMIT': 1000,
    'OFFLINE_MAX_ATTEMPTS': 10,
    'SCAN_HISTORY_SIZE': 20,
    'AGENT_CODE_ATTEMPTS': 50,
    'LOW_STOCK_THRESHOLD': 5,
    'CACHE_VERSION': 'v2',
    'DEFAULT_EVENT_LOCATION': 'Restaurant NACK',
    'DEFAULT_EVENT_CAPACITY': 50,
    'PUBLIC_BASE_URL': env('PUBLIC_BASE_URL', default='http://localhost:8000'),
}

# Payment gateway
SINGPAY = {
    'BASE_URL': env('SINGPAY_BASE_URL', default='https://gateway.singpay.ga'),
    'CLIENT_ID': env('SINGPAY_CLIENT_ID', default=''),
    'CLIENT_SECRET': env('SINGPAY_CLIENT_SECRET', default=''),
    'WALLET': env('SINGPAY_WALLET', default=''),
    'DISBURSEMENT': env('SINGPAY_DISBURSEMENT', default=''),
    'LOGO_URL': env('SINGPAY_LOGO_URL', default=''),
    'TIMEOUT': 30.0,
}

CELERY_BEAT_SCHEDULE = {
    'flush-offline-queue': {
        'task': 'apps.sync.tasks.flush_offline_queue',
        'schedule': float(NACK['OFFLINE_FLUSH_INTERVAL']),
    },
    'check-low-stock': {
        'task': 'apps.inventory.tasks.check_low_stock',
        'schedule': timedelta(hours=1),
    },
    'expire-subscriptions': {
        'task': 'apps.billing.tasks.expire_subscriptions',
        'schedule': timedelta(days=1),
    },
}

# JWT lifetimes (seconds)
JWT_ACCESS_TTL = 3600
JWT_REFRESH_TTL = 7 * 24 * 3600

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
        'json': {
            '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'json_console': {
            'class': 'logging.StreamHandler',
            'formatter': 'json',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['json_console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
