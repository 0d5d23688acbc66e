"""Observability setup for OpenTelemetry, metrics, and structured logging."""

import logging

import structlog
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from .. import __version__
from .config import settings

SERVICE_NAME = "travelpod-api"

# Prometheus metrics
REGISTRY = CollectorRegistry()

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code'],
    registry=REGISTRY
)

REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=REGISTRY
)

# Business metrics
TRIPS_STARTED = Counter(
    'trips_started_total',
    'Total trip drafts started',
    ['international'],
    registry=REGISTRY
)

WIZARD_STEPS_COMPLETED = Counter(
    'trip_wizard_steps_completed_total',
    'Total trip wizard steps submitted',
    ['step'],
    registry=REGISTRY
)

BOOKINGS_PAID = Counter(
    'bookings_paid_total',
    'Total trips paid and confirmed',
    registry=REGISTRY
)

REVENUE_TOTAL = Counter(
    'booking_revenue_minor_units_total',
    'Total amount paid in minor currency units',
    ['currency'],
    registry=REGISTRY
)

DISCOUNTS_APPLIED = Counter(
    'discounts_applied_total',
    'Total discount codes applied to trips',
    ['discount_type'],
    registry=REGISTRY
)

DRAFTS_ABANDONED = Counter(
    'trip_drafts_abandoned_total',
    'Total trip drafts expired by the background worker',
    registry=REGISTRY
)

ADMIN_LOGINS = Counter(
    'admin_logins_total',
    'Admin login attempts',
    ['outcome'],
    registry=REGISTRY
)


def setup_structured_logging():
    """Configure stdlib logging and structlog."""
    logging.basicConfig(level=getattr(logging, settings.log_level), format="%(message)s")

    def add_trace_context(logger, method_name, event_dict):
        """Add trace context to log events."""
        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            event_dict['trace_id'] = format(ctx.trace_id, '032x')
            event_dict['span_id'] = format(ctx.span_id, '016x')
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _resource() -> Resource:
    return Resource.create({
        "service.name": SERVICE_NAME,
        "service.version": __version__,
        "environment": settings.environment,
    })


def setup_tracing():
    """Setup OpenTelemetry tracing, exporting over OTLP when an endpoint is configured."""
    provider = TracerProvider(resource=_resource())

    if settings.otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint))
        )

    trace.set_tracer_provider(provider)
    return trace.get_tracer(__name__)


def setup_metrics():
    """Setup OpenTelemetry metrics."""
    if settings.otlp_endpoint:
        reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=settings.otlp_endpoint),
            export_interval_millis=60000,
        )
        metrics.set_meter_provider(MeterProvider(resource=_resource(), metric_readers=[reader]))

    return metrics.get_meter(__name__)


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy(engine):
    """Instrument the async engine's underlying sync engine."""
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)


class MetricsCollector:
    """Collector for business metrics."""

    @staticmethod
    def record_trip_started(is_international: bool):
        TRIPS_STARTED.labels(international=str(is_international).lower()).inc()

    @staticmethod
    def record_step_completed(step: str):
        WIZARD_STEPS_COMPLETED.labels(step=step).inc()

    @staticmethod
    def record_booking_paid(amount: int, currency: str):
        """Record a confirmed booking and the amount collected."""
        BOOKINGS_PAID.inc()
        REVENUE_TOTAL.labels(currency=currency).inc(amount)

    @staticmethod
    def record_discount_applied(discount_type: str):
        DISCOUNTS_APPLIED.labels(discount_type=discount_type).inc()

    @staticmethod
    def record_drafts_abandoned(count: int):
        if count:
            DRAFTS_ABANDONED.inc(count)

    @staticmethod
    def record_admin_login(outcome: str):
        ADMIN_LOGINS.labels(outcome=outcome).inc()


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()


class StructuredLogger:
    """Structured logger with business context."""

    def __init__(self, name: str, logger=None):
        self.logger = logger if logger is not None else structlog.get_logger(name)
        self.name = name

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)

    def with_context(self, **kwargs):
        """Return a logger with additional bound context."""
        return StructuredLogger(self.name, self.logger.bind(**kwargs))


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)
