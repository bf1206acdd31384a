"""OpenTelemetry wiring for the ratings service.

Traces and metrics go to an OTLP collector unless exporters are supplied by
the caller. Application code only talks to the ``opentelemetry`` API, so
spans and counters recorded before (or without) setup are no-ops.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from sqlalchemy.ext.asyncio import AsyncEngine

from analyst_ratings.config import AppSettings

logger = logging.getLogger(__name__)

SERVICE_NAMESPACE = "analyst-ratings"

_TELEMETRY_INITIALISED = False
_METRIC_EXPORT_INTERVAL_MS = 10000


@dataclass
class TelemetryExporters:
    """Where spans and metrics are sent; ``None`` entries fall back to OTLP."""

    spans: SpanExporter | None = None
    metrics: MetricReader | None = None


def setup_telemetry(
    app: FastAPI,
    settings: AppSettings,
    engine: AsyncEngine | None = None,
    exporters: TelemetryExporters | None = None,
) -> bool:
    """Install providers and instrument the API, the feed client and the database.

    Returns ``True`` when instrumentation was installed by this call.
    """

    global _TELEMETRY_INITIALISED  # noqa: PLW0603 - single initialisation guard

    if _TELEMETRY_INITIALISED:
        return False

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    exporters = exporters or TelemetryExporters()
    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: SERVICE_NAMESPACE,
        }
    )
    otlp_options = _otlp_options(settings)

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(
        BatchSpanProcessor(exporters.spans or OTLPSpanExporter(**otlp_options))
    )
    trace.set_tracer_provider(tracer_provider)

    metric_reader = exporters.metrics or PeriodicExportingMetricReader(
        OTLPMetricExporter(**otlp_options),
        export_interval_millis=_METRIC_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)

    if settings.telemetry_export_logs:
        logger_provider = LoggerProvider(resource=resource)
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(**otlp_options))
        )
        set_logger_provider(logger_provider)
        LoggingInstrumentor().instrument(set_logging_format=False)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
    )
    # Feed requests get client spans; trace context is injected by the client
    HTTPXClientInstrumentor().instrument(tracer_provider=tracer_provider)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine,
            tracer_provider=tracer_provider,
        )

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry initialised for %s", settings.telemetry_service_name)
    return True


def _otlp_options(settings: AppSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


__all__ = [
    "TelemetryExporters",
    "setup_telemetry",
]
