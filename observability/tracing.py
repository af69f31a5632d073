from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
import logging

# Configure logger
logger = logging.getLogger("serviced.tracing")


def setup_tracing(app, settings):
    """
    Set up OpenTelemetry tracing.

    Args:
        app (FastAPI): FastAPI application to instrument
        settings (Settings): Service settings

    Returns:
        bool: True if tracing was installed
    """
    if not settings.enable_tracing:
        logger.info("Tracing is disabled")
        return False

    try:
        # Set up tracer provider
        resource = Resource.create({"service.name": settings.service_name})
        tracer_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(tracer_provider)

        # Set up exporter
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)
        span_processor = BatchSpanProcessor(otlp_exporter)
        tracer_provider.add_span_processor(span_processor)

        FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)
        logger.info("OpenTelemetry tracing set up, exporting to %s", settings.otlp_endpoint)
        return True
    except Exception as e:
        logger.error(f"Failed to set up tracing: {e}")
        return False
