"""
OpenTelemetry tracing: Jaeger export plus FastAPI and SQLAlchemy instrumentation
"""
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
import structlog

from giving_api.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)

UNTRACED_URLS = "/health,/health/ready,/metrics"


def _build_provider(settings: Settings) -> TracerProvider:
    # Exporter is imported lazily so the thrift stack is only loaded when tracing is on
    from opentelemetry.exporter.jaeger.thrift import JaegerExporter

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: settings.service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(
            JaegerExporter(collector_endpoint=settings.jaeger_endpoint),
            max_queue_size=2048,
            max_export_batch_size=512,
            schedule_delay_millis=5000
        )
    )
    return provider


def _instrument_database():
    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
    from giving_api.database.database import engine

    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, enable_commenter=True)


def init_tracing(app) -> bool:
    """
    Install the tracer provider and instrument the app.

    Returns True when tracing is active. Any failure is logged and leaves the
    service running untraced.
    """
    settings = get_settings()
    if not settings.tracing_enabled:
        logger.info("Tracing disabled by configuration")
        return False

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        trace.set_tracer_provider(_build_provider(settings))
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)
    except Exception as e:
        logger.error("Failed to initialize tracing", error=str(e), exc_info=True)
        return False

    try:
        _instrument_database()
    except Exception as e:
        logger.warning("Database spans unavailable", error=str(e))

    logger.info("Tracing initialized", service_name=settings.service_name, jaeger_endpoint=settings.jaeger_endpoint)
    return True


def get_tracer(name: str = __name__):
    return trace.get_tracer(name)
