from __future__ import annotations

import logging
import os
import sys

try:
    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
except Exception:  # pragma: no cover - optional dependency resolution
    trace = None
    Resource = None
    TracerProvider = None
    BatchSpanProcessor = None
    ConsoleSpanExporter = None
    OTLPSpanExporter = None


logger = logging.getLogger("memorykeeper.api")


def _tracing_enabled() -> bool:
    return os.getenv("MEMORYKEEPER_TRACING", "true").lower() == "true"


def init_observability(service_name: str = "memorykeeper") -> bool:
    """Install a tracer provider. Returns True when tracing is active."""
    if "pytest" in sys.modules or not _tracing_enabled():
        return False
    if trace is None or TracerProvider is None:
        return False

    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return True

    resource = Resource.create(
        {"service.name": os.getenv("OTEL_SERVICE_NAME", service_name)}
    )
    provider = TracerProvider(resource=resource)

    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint and OTLPSpanExporter is not None:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
        logger.info("tracing_enabled exporter=otlp endpoint=%s", otlp_endpoint)
    elif ConsoleSpanExporter is not None:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("tracing_enabled exporter=console")

    trace.set_tracer_provider(provider)
    return True
