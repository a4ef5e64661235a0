"""
Core views for NACK POS.
"""
import logging

import redis
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


@never_cache
@csrf_exempt
@require_http_methods(["GET"])
def health_check(request):
    """
    Health check endpoint for monitoring.
    Returns JSON with database, cache and broker status.
    """
    status = {
        'status': 'healthy',
        'version': '1.0.0',
        'timestamp': timezone.now().isoformat(),
        'checks': {}
    }

    overall_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        status['checks']['database'] = {'status': 'healthy'}
    except Exception as e:
        logger.error("Database health check failed", extra={'error': str(e), 'event_type': 'health_check'})
        status['checks']['database'] = {'status': 'unhealthy', 'error': str(e)}
        overall_healthy = False

    try:
        cache.set('health_check', 'ok', 10)
        cache.get('health_check')
        status['checks']['cache'] = {'status': 'healthy'}
    except Exception as e:
        status['checks']['cache'] = {'status': 'unhealthy', 'error': str(e)}
        overall_healthy = False

    if settings.REDIS_URL:
        try:
            redis.from_url(settings.REDIS_URL).ping()
            status['checks']['broker'] = {'status': 'healthy'}
        except redis.RedisError as e:
            status['checks']['broker'] = {'status': 'unhealthy', 'error': str(e)}
            overall_healthy = False

    if not overall_healthy:
        status['status'] = 'unhealthy'

    return JsonResponse(status, status=200 if overall_healthy else 503)


@never_cache
@csrf_exempt
@require_http_methods(["GET"])
def readiness_check(request):
    """Returns 200 once the app is ready to serve."""
    return HttpResponse("Ready", content_type="text/plain")
