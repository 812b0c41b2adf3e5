from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from aawaaj_admin.core.config import Settings


SERVICE_NAME = "aawaaj-admin"

_provider: TracerProvider | None = None


def tracer_provider(version: str = "0.1.0") -> TracerProvider:
    """Process-wide provider; the first caller fixes the resource attributes."""

    global _provider
    if _provider is None:
        _provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME, "service.version": version}))
        trace.set_tracer_provider(_provider)
    return _provider


def setup_otel(settings: Settings, version: str) -> TracerProvider:
    provider = tracer_provider(version)
    # Without a collector endpoint spans are recorded for correlation but never exported.
    if settings.otel_exporter_otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)))
    return provider


def capture_spans() -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    tracer_provider().add_span_processor(SimpleSpanProcessor(exporter))
    return exporter
