# ilp_runner/shared/logging_config.py
import sys
import logging
import structlog
from opentelemetry import trace

from ilp_runner.core.domain.models import MASK

SENSITIVE_KEYS = ("secret", "token", "password")

def add_open_telemetry_spans(_, __, event_dict):
    """
    Processor to inject the current TraceID and SpanID into the log entry,
    so each stage's logs line up with its `stage.<component>` span.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return event_dict

    ctx = span.get_span_context()
    event_dict["trace_id"] = format(ctx.trace_id, "032x")
    event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict

def mask_secrets(_, __, event_dict):
    """Processor that blanks any value logged under a secret-looking key."""
    for key in list(event_dict):
        if any(marker in key.lower() for marker in SENSITIVE_KEYS):
            event_dict[key] = MASK
    return event_dict

def configure_logging(level: str = "INFO", fmt: str = "console"):
    """
    Configures structlog and the standard logging library to emit
    structured JSON logs or human-readable console logs.

    Logs go to stderr; stdout is shared with the children's inherited streams.
    """

    # 1. Processor chain
    processors = [
        structlog.contextvars.merge_contextvars,
        add_open_telemetry_spans,
        mask_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # 2. Output format
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # 3. Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # 4. Standard library logging (redis, tenacity...)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level.upper(),
    )
