"""
Daily worklist: the appointments, injections and examinations of one day.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum

from scintiflow.models.core import Patient, RoomId, as_utc
from scintiflow.models.exams import NOT_AVAILABLE


class TimelineEventType(str, Enum):
    APPOINTMENT = "appointment"
    INJECTION = "injection"
    EXAMINATION = "examination"


@dataclass(frozen=True)
class TimelineEvent:
    id: str
    time: str  # "HH:MM"
    patient_id: str
    patient_name: str
    type: TimelineEventType
    description: str


def _completion_on(patient: Patient, room_id: RoomId, day: date, tz) -> datetime | None:
    """Latest closed entry of a room whose exit falls on `day`."""
    matches = [
        as_utc(entry.exit_date) for entry in patient.history
        if entry.room_id == room_id
        and entry.exit_date is not None
        and as_utc(entry.exit_date).astimezone(tz).date() == day
    ]
    return max(matches) if matches else None


def daily_worklist(patients: list[Patient], day: date, tz=timezone.utc) -> list[TimelineEvent]:
    """
    Build the time-ordered worklist for a day.

    Appointments come from the appointment form (dateRdv/heureRdv); injections
    and examinations from the day's ledger, with the injection time recorded on
    the form when available.
    """
    events: list[TimelineEvent] = []

    for patient in patients:
        appointment = patient.room_data(RoomId.APPOINTMENT)
        if appointment.get("dateRdv") == day.isoformat():
            events.append(
                TimelineEvent(
                    id=f"{patient.id}:appointment",
                    time=appointment.get("heureRdv") or "00:00",
                    patient_id=patient.id,
                    patient_name=patient.name,
                    type=TimelineEventType.APPOINTMENT,
                    description=f"RDV {patient.requested_exam or 'examen non spécifié'}",
                )
            )

        injected_at = _completion_on(patient, RoomId.INJECTION, day, tz)
        if injected_at is not None:
            injection = patient.room_data(RoomId.INJECTION)
            recorded_time = injection.get("heureInjection")
            events.append(
                TimelineEvent(
                    id=f"{patient.id}:injection",
                    time=recorded_time if recorded_time and recorded_time != NOT_AVAILABLE
                    else injected_at.astimezone(tz).strftime("%H:%M"),
                    patient_id=patient.id,
                    patient_name=patient.name,
                    type=TimelineEventType.INJECTION,
                    description=(
                        f"Injection {injection.get('produitInjecte', NOT_AVAILABLE)} "
                        f"({injection.get('dose', NOT_AVAILABLE)})"
                    ),
                )
            )

        examined_at = _completion_on(patient, RoomId.EXAMINATION, day, tz)
        if examined_at is not None:
            examination = patient.room_data(RoomId.EXAMINATION)
            events.append(
                TimelineEvent(
                    id=f"{patient.id}:examination",
                    time=examined_at.astimezone(tz).strftime("%H:%M"),
                    patient_id=patient.id,
                    patient_name=patient.name,
                    type=TimelineEventType.EXAMINATION,
                    description=f"Examen (Qualité: {examination.get('qualiteImages') or NOT_AVAILABLE})",
                )
            )

    events.sort(key=lambda event: (event.time, event.patient_name))
    return events
