import os
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource

import config
from logger import setup_logger

logger = setup_logger(__name__)


def setup_telemetry(service_name: str = config.SERVICE_NAME):
    """
    Install the global tracer provider for the aggregator.

    OTLP over HTTP when OTEL_EXPORTER_OTLP_ENDPOINT is set, console spans when
    OTEL_CONSOLE=true, otherwise spans are recorded but not exported.
    """
    resource = Resource.create(attributes={
        "service.name": service_name,
    })
    provider = TracerProvider(resource=resource)

    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
        logger.info(f"OTel: OTLP exporter to {otlp_endpoint}", extra={"event": "telemetry_configured"})
    elif config.OTEL_CONSOLE:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("OTel: console exporter", extra={"event": "telemetry_configured"})
    else:
        logger.info("OTel: no exporter configured", extra={"event": "telemetry_configured"})

    trace.set_tracer_provider(provider)
    return trace.get_tracer(service_name)
