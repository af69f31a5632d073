import pytest
import os
import sys
from unittest.mock import patch, MagicMock

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import Settings
from observability.metrics import RequestMetricsMiddleware, metrics, route_label
from observability.tracing import setup_tracing
from prometheus_client import REGISTRY
from fastapi.testclient import TestClient


@pytest.mark.parametrize("path, label", [
    ("/", "index"),
    ("/health", "health"),
    ("/metrics", "metrics"),
    ("/style.css", "static"),
    ("/a/b/c.png", "static"),
])
def test_route_label(path, label):
    """Test paths collapse onto a bounded label set."""
    assert route_label(path) == label

def test_record_request():
    """Test a recorded request updates counter and histogram."""
    labels = {"method": "HEAD", "route": "static", "status": "200"}
    before = REGISTRY.get_sample_value("serviced_http_requests_total", labels) or 0.0
    count_before = REGISTRY.get_sample_value(
        "serviced_http_request_duration_seconds_count", {"method": "HEAD", "route": "static"}
    ) or 0.0

    metrics.record_request("HEAD", "/style.css", 200, 0.002)

    assert REGISTRY.get_sample_value("serviced_http_requests_total", labels) == before + 1
    assert REGISTRY.get_sample_value(
        "serviced_http_request_duration_seconds_count", {"method": "HEAD", "route": "static"}
    ) == count_before + 1

def test_request_timer():
    """Test the timer measures a non-negative duration."""
    with metrics.request_timer() as timer:
        pass

    assert timer.duration >= 0.0

def test_middleware_records_failed_request():
    """Test a request that raises before responding is recorded as 500."""
    async def broken_app(scope, receive, send):
        raise RuntimeError("boom")

    labels = {"method": "GET", "route": "static", "status": "500"}
    before = REGISTRY.get_sample_value("serviced_http_requests_total", labels) or 0.0
    client = TestClient(RequestMetricsMiddleware(broken_app), raise_server_exceptions=False)

    response = client.get("/broken.css")

    assert response.status_code == 500
    assert REGISTRY.get_sample_value("serviced_http_requests_total", labels) == before + 1

def test_tracing_disabled():
    """Test nothing is instrumented when tracing is off."""
    with patch("observability.tracing.FastAPIInstrumentor") as mock_instrumentor:
        assert setup_tracing(MagicMock(), Settings(enable_tracing=False)) is False
        mock_instrumentor.instrument_app.assert_not_called()

def test_tracing_enabled():
    """Test the app is instrumented with an OTLP exporter."""
    app = MagicMock()
    settings = Settings(enable_tracing=True, otlp_endpoint="collector:4317")
    with patch("observability.tracing.OTLPSpanExporter") as mock_exporter, \
         patch("observability.tracing.BatchSpanProcessor") as mock_processor, \
         patch("observability.tracing.trace") as mock_trace, \
         patch("observability.tracing.FastAPIInstrumentor") as mock_instrumentor:

        assert setup_tracing(app, settings) is True

        mock_exporter.assert_called_once_with(endpoint="collector:4317", insecure=True)
        mock_processor.assert_called_once_with(mock_exporter.return_value)
        mock_trace.set_tracer_provider.assert_called_once()
        mock_instrumentor.instrument_app.assert_called_once()
        assert mock_instrumentor.instrument_app.call_args[0][0] is app

def test_tracing_failure_is_logged(caplog):
    """Test exporter errors never escape setup."""
    with patch("observability.tracing.OTLPSpanExporter", side_effect=RuntimeError("no collector")), \
         patch("observability.tracing.trace"):
        assert setup_tracing(MagicMock(), Settings(enable_tracing=True)) is False

    assert "Failed to set up tracing: no collector" in caplog.text
