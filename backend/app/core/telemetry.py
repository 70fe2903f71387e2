"""OpenTelemetry wiring for the API, outbound price feeds and the database."""

from __future__ import annotations

import logging
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
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import AppSettings

logger = logging.getLogger(__name__)

_TELEMETRY_INITIALISED = False
_METRIC_EXPORT_INTERVAL_MS = 15000


def setup_telemetry(app: FastAPI, settings: AppSettings, engine: AsyncEngine | None = None) -> bool:
    """Install OTLP exporters and instrument FastAPI, httpx and SQLAlchemy.

    Returns ``True`` when instrumentation is active after the call.
    """

    global _TELEMETRY_INITIALISED  # noqa: PLW0603 - single initialisation guard

    if _TELEMETRY_INITIALISED:
        return True

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: "asset-tracker",
        }
    )
    options = _exporter_options(settings)

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**options)))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(**options),
        export_interval_millis=_METRIC_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**options)))
    set_logger_provider(logger_provider)
    LoggingInstrumentor().instrument(set_logging_format=False)

    FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider, meter_provider=meter_provider)
    # price and NAV feeds go through httpx
    HTTPXClientInstrumentor().instrument()
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=tracer_provider)

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry initialised (endpoint=%s)", settings.telemetry_otlp_endpoint or "default")
    return True


def _exporter_options(settings: AppSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


__all__ = ["setup_telemetry"]
