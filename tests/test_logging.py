import structlog

from scintiflow.observability.logging import (
    REDACTED,
    configure_logging,
    identity_redaction_processor,
)


def test_identity_fields_are_masked():
    event = identity_redaction_processor(
        None,
        "info",
        {
            "event": "Patient created",
            "patient_id": "PAT1234ABCD",
            "patient_name": "Jean Dupont",
            "date_of_birth": "1965-03-15",
            "email": None,
        },
    )

    assert event["patient_name"] == REDACTED
    assert event["date_of_birth"] == REDACTED
    assert event["email"] is None
    assert event["patient_id"] == "PAT1234ABCD"
    assert event["event"] == "Patient created"


def test_configure_logging_installs_redaction():
    try:
        configure_logging("DEBUG", json_output=True)

        processors = structlog.get_config()["processors"]
        assert identity_redaction_processor in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    finally:
        structlog.reset_defaults()
