"""
Structured Logging

Features:
- JSON or console output
- ISO timestamps and log levels
- Patient identity fields masked before rendering
"""

import logging
import sys

import structlog

# Keys that carry patient identity; values are masked in every log event.
REDACTED_KEYS = frozenset({
    "patient_name",
    "name",
    "date_of_birth",
    "phone",
    "email",
    "address",
})
REDACTED = "[REDACTED]"


def identity_redaction_processor(logger, method_name, event_dict):
    """Mask patient identity fields in a log event."""
    for key in REDACTED_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        level: Minimum log level name
        json_output: Render JSON lines; console rendering otherwise
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            identity_redaction_processor,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
