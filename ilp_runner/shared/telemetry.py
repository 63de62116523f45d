# ilp_runner/shared/telemetry.py
import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from ilp_runner import __version__

logger = logging.getLogger(__name__)

def setup_telemetry(service_name: str, debug: bool = False):
    """
    Initializes the OpenTelemetry SDK.
    Should be called once at process startup, after logging is configured.
    """
    # 1. Service identity
    resource = Resource.create(attributes={
        "service.name": service_name,
        "service.version": __version__,
    })

    # 2. Tracer provider
    trace_provider = TracerProvider(resource=resource)

    # 3. Console exporter for local debugging
    if debug:
        trace_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(trace_provider)
    logger.debug("Telemetry initialized for service: %s", service_name)

def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation.
    Without `setup_telemetry` this returns a no-op tracer.
    """
    return trace.get_tracer(name)
