import time
from prometheus_client import Counter, Histogram, CONTENT_TYPE_LATEST, generate_latest
import logging

# Configure logger
logger = logging.getLogger("serviced.metrics")

# Define metrics
HTTP_REQUESTS_TOTAL = Counter(
    'serviced_http_requests_total',
    'Total number of HTTP requests served',
    ['method', 'route', 'status']
)

HTTP_REQUEST_DURATION = Histogram(
    'serviced_http_request_duration_seconds',
    'Time spent serving HTTP requests, including the response body',
    ['method', 'route'],
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

# Paths answered by named routes; everything else is a static file lookup
NAMED_ROUTES = {
    '/': 'index',
    '/health': 'health',
    '/metrics': 'metrics',
}


def route_label(path):
    """Map a request path onto a bounded label value."""
    return NAMED_ROUTES.get(path, 'static')


class MetricsCollector:
    """
    Metrics collector for Service D.
    Provides methods for recording request metrics and rendering them.
    """

    @staticmethod
    def record_request(method, path, status_code, duration):
        """
        Record a served request.

        Args:
            method (str): HTTP method
            path (str): Request path
            status_code (int): Response status
            duration (float): Time taken in seconds
        """
        route = route_label(path)
        HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=str(status_code)).inc()
        HTTP_REQUEST_DURATION.labels(method=method, route=route).observe(duration)
        logger.debug(f"Recorded request: {method} {path} -> {status_code} in {duration:.4f}s")

    @staticmethod
    def request_timer():
        """
        Context manager for timing a request.

        Returns:
            context manager: Timer exposing ``duration`` once exited
        """
        class Timer:
            def __enter__(self):
                self.start_time = time.perf_counter()
                self.duration = 0.0
                return self

            def __exit__(self, exc_type, exc_val, exc_tb):
                self.duration = time.perf_counter() - self.start_time

        return Timer()

    @staticmethod
    def render():
        """Return the exposition body and its content type."""
        return generate_latest(), CONTENT_TYPE_LATEST


# Create a singleton instance
metrics = MetricsCollector()


class RequestMetricsMiddleware:
    """
    ASGI middleware recording every HTTP request.

    Timing stops once the last body chunk is sent, so streamed static
    files are measured in full. A request that fails before the response
    starts is recorded as 500.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        timer = metrics.request_timer()
        try:
            with timer:
                await self.app(scope, receive, send_wrapper)
        finally:
            metrics.record_request(scope["method"], scope["path"], status_code, timer.duration)
