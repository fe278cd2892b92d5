"""
Rate Limiting for the API

Coarse fixed-window admission control in front of every API request:
each client IP gets API_RATE_LIMIT requests per API_RATE_LIMIT_WINDOW seconds.
Counting happens in middleware, before authentication, so rejected and
unauthenticated calls spend quota too.
"""
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse

logger = logging.getLogger(__name__)


RATE_LIMIT_MESSAGE = 'Too many requests, please try again later.'


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


def check_rate_limit(identifier, max_count, window_seconds, now=None):
    """
    Count one request for identifier and check it against the limit.

    Windows are aligned to multiples of window_seconds so every client
    shares the same boundaries.

    Args:
        identifier: Client IP address
        max_count: Maximum allowed requests per window
        window_seconds: Window length in seconds
        now: Current epoch time, defaults to time.time()

    Returns:
        tuple: (is_allowed, retry_after_seconds)
    """
    if now is None:
        now = time.time()

    window_start = int(now // window_seconds) * window_seconds
    key = f'api-rate-limit:{identifier}:{window_start}'

    # add() is a no-op when the window counter already exists
    cache.add(key, 0, timeout=window_seconds)
    try:
        count = cache.incr(key)
    except ValueError:
        # Counter expired between add() and incr()
        cache.set(key, 1, timeout=window_seconds)
        count = 1

    if count > max_count:
        retry_after = max(int(window_start + window_seconds - now), 1)
        return False, retry_after

    return True, 0


class APIRateLimitMiddleware:
    """
    Middleware applying check_rate_limit per client IP to every /api/ path.

    Runs before URL resolution and DRF authentication; over-quota requests
    get 429 with Retry-After and never reach a view.
    """

    PATH_PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith(self.PATH_PREFIX):
            return self.get_response(request)

        ip = get_client_ip(request) or 'unknown'
        allowed, retry_after = check_rate_limit(
            ip,
            settings.API_RATE_LIMIT,
            settings.API_RATE_LIMIT_WINDOW,
        )
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", ip, request.path)
            response = JsonResponse(
                {'success': False, 'message': RATE_LIMIT_MESSAGE},
                status=429
            )
            response['Retry-After'] = str(retry_after)
            return response

        return self.get_response(request)
