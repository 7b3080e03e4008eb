"""Request dependencies."""

from fastapi import Request

from scintiflow.store.service import PatientService


def get_service(request: Request) -> PatientService:
    """Service instance attached to the application at start-up."""
    return request.app.state.service
