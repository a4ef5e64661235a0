"""
Request logging and security headers middleware for NACK POS.
"""
import logging
import time
import uuid

from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


def get_client_ip(request: HttpRequest) -> str:
    """Extract client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Security headers for API and PWA responses.
    """

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        """Add security headers to response."""
        if not response.get('Content-Security-Policy'):
            csp_directives = [
                "default-src 'self'",
                "script-src 'self' 'unsafe-inline'",
                "style-src 'self' 'unsafe-inline'",
                "img-src 'self' data: blob:",  # QR codes and product photos
                "connect-src 'self'",
                "font-src 'self'",
                "object-src 'none'",
                "base-uri 'self'",
                "frame-ancestors 'none'",
            ]
            response['Content-Security-Policy'] = '; '.join(csp_directives)

        response['X-Content-Type-Options'] = 'nosniff'
        response['X-Frame-Options'] = 'DENY'
        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        # Event agents scan tickets with the device camera
        response['Permissions-Policy'] = 'camera=(self), microphone=(), geolocation=()'

        if 'Server' in response:
            del response['Server']

        return response


class RequestLoggingMiddleware(MiddlewareMixin):
    """
    Structured request logging.
    """

    def process_request(self, request: HttpRequest) -> None:
        """Log incoming request with structured data."""
        request._start_time = time.time()
        request._request_id = request.META.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())

        logger.info("Request started", extra={
            'request_id': request._request_id,
            'method': request.method,
            'path': request.path,
            'agent_code': request.META.get('HTTP_X_AGENT_CODE', ''),
            'ip_address': get_client_ip(request),
            'user_agent': request.META.get('HTTP_USER_AGENT', '')[:200],
            'event_type': 'request_start'
        })

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        """Log response with timing information."""
        if hasattr(request, '_start_time'):
            duration = time.time() - request._start_time
            user = getattr(request, 'user', None)

            logger.info("Request completed", extra={
                'request_id': getattr(request, '_request_id', ''),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': round(duration * 1000, 2),
                'user_id': getattr(user, 'id', None),
                'event_type': 'request_end'
            })
            response['X-Request-ID'] = request._request_id

        return response
