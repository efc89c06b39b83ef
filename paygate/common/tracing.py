"""OpenTelemetry setup for the gateway and bank simulator apps.

Tracing is skipped entirely when `TRACING_ENABLED` is false, which is how local
runs and tests avoid needing a collector.
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from paygate.common.config import settings

UNTRACED_URLS = "/health,/metrics"


def setup_tracing(service_name: str) -> None:
    """Register a tracer provider exporting spans over OTLP HTTP."""

    if not settings.tracing_enabled:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint))
    )
    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI) -> None:
    """Attach request spans to every route except the probes."""

    if settings.tracing_enabled:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)
