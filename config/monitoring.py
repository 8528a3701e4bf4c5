"""
Request monitoring middleware.
"""
import logging
from datetime import datetime

from django.conf import settings
from django.db import connection
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES = ('/admin/', '/static/', '/api/docs/', '/api/schema/')

# Polled by the frontend on every navigation
QUIET_SUFFIXES = ('/auth/profile/', '/pages/versions/')


def _should_skip(request):
    return request.path.startswith(SKIPPED_PREFIXES) or request.path.endswith(QUIET_SUFFIXES)


class QueryCountDebugMiddleware(MiddlewareMixin):
    """
    Logs the number of queries run and their total time for each request.
    Only active with DEBUG, where Django records connection.queries.
    """
    def process_response(self, request, response):
        if settings.DEBUG and not _should_skip(request):
            queries = connection.queries
            total_time = sum(float(query.get('time') or 0) for query in queries)
            logger.debug(
                "[SQL] %s %s | %s queries, %.3fs",
                request.method,
                request.path,
                len(queries),
                total_time
            )
        return response


class RequestResponseLogMiddleware(MiddlewareMixin):
    """
    Logs one line per request and per response for API monitoring.
    Request bodies are never logged since they may carry passwords.
    """
    def process_request(self, request):
        if _should_skip(request):
            return None

        request.start_time = datetime.now()
        logger.info(
            "[REQUEST] %s %s | Params: %s",
            request.method,
            request.get_full_path(),
            dict(request.GET)
        )
        return None

    def process_response(self, request, response):
        if _should_skip(request):
            return response

        duration = 0
        if hasattr(request, 'start_time'):
            duration = (datetime.now() - request.start_time).total_seconds()

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "[RESPONSE] %s %s | Status: %s | Duration: %.2fs | User: %s",
            request.method,
            request.get_full_path(),
            response.status_code,
            duration,
            getattr(request, 'user', 'Anonymous')
        )

        response['X-Request-Duration'] = f"{duration:.2f}"
        return response
