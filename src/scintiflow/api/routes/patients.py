"""
Patient Routes

Intake, room form submission, manual moves and per-patient durations.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scintiflow.api.deps import get_service
from scintiflow.models.core import PatientIdentity, RoomId
from scintiflow.store.service import PatientService

router = APIRouter(prefix="/patients", tags=["Patients"])


# =============================================================================
# Request / Response Models
# =============================================================================

class CreatePatientRequest(PatientIdentity):
    """Identity plus an optional completed request form."""
    request_data: dict[str, Any] | None = None


class MovePatientRequest(BaseModel):
    """Target of a manual move."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    target_room_id: RoomId


class SegmentDurationResponse(BaseModel):
    """Elapsed time for one pathway segment."""
    label: str
    status: str
    start: str | None = None
    end: str | None = None
    duration_ms: int | None = None
    display: str


class PatientListResponse(BaseModel):
    """List of patients as snapshot documents."""
    patients: list[dict] = Field(default_factory=list)
    total: int


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(
    body: CreatePatientRequest,
    service: PatientService = Depends(get_service),
):
    """Register a patient, completing the request room when an exam is given."""
    identity = PatientIdentity.model_validate(body.model_dump(exclude={"request_data"}))
    patient = service.create_patient(identity, body.request_data)
    return patient.to_snapshot()


@router.get("", response_model=PatientListResponse)
async def list_patients(
    room: RoomId | None = Query(default=None, description="Only patients currently in this room"),
    q: str | None = Query(default=None, description="Search by name or id"),
    service: PatientService = Depends(get_service),
):
    """List patients, filtered by current room or search term."""
    if q:
        patients = service.search(q)
        if room is not None:
            patients = [p for p in patients if p.current_room_id == room]
    else:
        patients = service.list_patients(room)
    return PatientListResponse(
        patients=[p.to_snapshot() for p in patients],
        total=len(patients),
    )


@router.get("/duplicates", response_model=PatientListResponse)
async def find_duplicates(
    name: str = Query(default=""),
    date_of_birth: str | None = Query(default=None, alias="dateOfBirth"),
    service: PatientService = Depends(get_service),
):
    """Existing patients that may match the person being registered."""
    patients = service.find_potential_duplicates(name, date_of_birth)
    return PatientListResponse(
        patients=[p.to_snapshot() for p in patients],
        total=len(patients),
    )


@router.get("/{patient_id}")
async def get_patient(patient_id: str, service: PatientService = Depends(get_service)):
    return service.get_patient(patient_id).to_snapshot()


@router.post("/{patient_id}/rooms/{room_id}/form")
async def submit_room_form(
    patient_id: str,
    room_id: str,
    form_data: dict[str, Any] = Body(...),
    service: PatientService = Depends(get_service),
):
    """Record a room form and advance the patient."""
    patient = service.submit_room_form(patient_id, room_id, form_data)
    return patient.to_snapshot()


@router.post("/{patient_id}/move")
async def move_patient(
    patient_id: str,
    body: MovePatientRequest,
    service: PatientService = Depends(get_service),
):
    """Move a patient to any room, outside the normal order."""
    patient = service.move_patient(patient_id, body.target_room_id)
    return patient.to_snapshot()


@router.get("/{patient_id}/durations", response_model=list[SegmentDurationResponse])
async def get_durations(patient_id: str, service: PatientService = Depends(get_service)):
    """Chained inter-room delays for a patient."""
    return [
        SegmentDurationResponse(
            label=result.segment.label,
            status=result.status.value,
            start=result.start.isoformat() if result.start else None,
            end=result.end.isoformat() if result.end else None,
            duration_ms=result.duration_ms,
            display=result.display,
        )
        for result in service.segment_durations(patient_id)
    ]
