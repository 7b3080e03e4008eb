"""Logging setup."""

from scintiflow.observability.logging import (
    REDACTED,
    configure_logging,
    identity_redaction_processor,
)

__all__ = ["REDACTED", "configure_logging", "identity_redaction_processor"]
