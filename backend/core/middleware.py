import logging
import time

logger = logging.getLogger("eventmate.requests")


class ApiRequestLogMiddleware:
    """Log one line per ``/api`` request: method, path, status and duration."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api"):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "%s %s %s in %sms",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
        )
        return response
