"""
Workflow Engine

The single authority for moving a patient through the department's rooms.

Every operation takes a Patient and returns a new one: the engine works on a
deep copy, so an error half-way through leaves the caller's patient intact and
callers can rely on identity to detect changes. Persistence is the caller's
concern.
"""

from copy import deepcopy
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

import structlog

from scintiflow.exceptions import InvalidTransitionError
from scintiflow.models.core import (
    Patient,
    PatientIdentity,
    PatientStatusInRoom,
    RoomId,
)
from scintiflow.models.exams import get_exam_profile, normalize_injection
from scintiflow.workflow import ledger, messages
from scintiflow.workflow.rooms import RoomGraph, get_room_graph

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_patient_id() -> str:
    return f"PAT{uuid4().hex[:8].upper()}"


class WorkflowEngine:
    """
    Patient pathway state machine.

    Operations:
    - submit_room_form: record a room's form and advance to the next room
    - create_patient: intake, optionally completing the request room at once
    - move_patient: supervisory move to any room, ignoring pathway order
    """

    def __init__(
        self,
        room_graph: RoomGraph | None = None,
        clock: Clock | None = None,
        tie_break: timedelta = ledger.DEFAULT_TIE_BREAK,
        enforce_current_room: bool = True,
    ):
        """
        Initialize the engine.

        Args:
            room_graph: Room configuration (defaults to the department graph)
            clock: Returns the current aware datetime
            tie_break: Offset separating a closed entry from the next room's entry
            enforce_current_room: Reject forms for a room the patient is not in
        """
        self.room_graph = room_graph or get_room_graph()
        self.clock = clock or utc_now
        self.tie_break = tie_break
        self.enforce_current_room = enforce_current_room

    # =========================================================================
    # Form submission
    # =========================================================================

    def submit_room_form(
        self,
        patient: Patient,
        room_id: RoomId | str,
        form_data: dict[str, Any],
    ) -> Patient:
        """
        Apply a room form submission.

        Args:
            patient: Patient as currently stored
            room_id: Room whose form was submitted
            form_data: Field values collected by the form collaborator

        Returns:
            Updated copy of the patient

        Raises:
            UnknownRoomError: room_id is not configured
            InvalidTransitionError: patient is not in room_id
        """
        room = self.room_graph.get_room(room_id)

        if self.enforce_current_room and room.id != patient.current_room_id:
            logger.warning(
                "Rejected form for inactive room",
                patient_id=patient.id,
                room_id=room.id.value,
                current_room_id=patient.current_room_id.value,
            )
            raise InvalidTransitionError(patient.id, room.id, patient.current_room_id)

        working = patient.model_copy(deep=True)
        self._advance(working, room.id, form_data)

        logger.info(
            "Room form submitted",
            patient_id=working.id,
            room_id=room.id.value,
            current_room_id=working.current_room_id.value,
            status=working.status_in_room.value,
        )
        return working

    def _advance(self, working: Patient, room_id: RoomId, form_data: dict[str, Any]) -> None:
        """Merge data, close the current visit, record completion, open the next room."""
        room = self.room_graph.get_room(room_id)
        next_room = (
            self.room_graph.get_room(room.next_room_id) if room.next_room_id else None
        )

        self._merge_form_data(working, room_id, form_data)

        history = working.history
        now = ledger.monotonic_now(history, self.clock())

        ledger.close_open_entry(history, room_id, now)
        if working.current_room_id != room_id:
            # backfilled room: the patient also leaves the room they were in
            ledger.close_open_entry(history, working.current_room_id, now)
        ledger.append_entry(
            history,
            room_id,
            now,
            messages.completion_message(room_id, working.room_data(room_id)),
            closed=True,
        )

        if next_room is None:
            working.status_in_room = PatientStatusInRoom.SEEN
            return

        working.current_room_id = next_room.id
        entered_at = now + self.tie_break

        if next_room.is_terminal:
            message = (
                messages.ARCHIVED if next_room.id == RoomId.ARCHIVE
                else messages.entered(next_room.name)
            )
            ledger.append_entry(history, next_room.id, entered_at, message, closed=True)
            working.status_in_room = PatientStatusInRoom.SEEN
        else:
            ledger.append_entry(history, next_room.id, entered_at, messages.entered(next_room.name))
            working.status_in_room = PatientStatusInRoom.WAITING

    def _merge_form_data(self, working: Patient, room_id: RoomId, form_data: dict[str, Any]) -> None:
        submitted = deepcopy(dict(form_data))
        room_data = working.room_specific_data

        if room_id != RoomId.INJECTION:
            room_data[room_id] = {**room_data.get(room_id, {}), **submitted}
            return

        profile = get_exam_profile(working.requested_exam)
        # placeholders only fill keys that no earlier submission provided
        room_data[RoomId.INJECTION] = {
            **normalize_injection({}, profile),
            **room_data.get(RoomId.INJECTION, {}),
            **normalize_injection(submitted, profile, fill_missing=False),
        }

        if profile is None:
            logger.debug(
                "No exam profile, injection details not copied to consultation",
                patient_id=working.id,
                requested_exam=working.requested_exam,
            )
            return

        consultation = dict(room_data.get(RoomId.CONSULTATION, {}))
        exam_data = dict(consultation.get(profile.consultation_key) or {})
        exam_data["injectionDetails"] = submitted
        consultation[profile.consultation_key] = exam_data
        room_data[RoomId.CONSULTATION] = consultation

    # =========================================================================
    # Intake
    # =========================================================================

    def create_patient(
        self,
        identity: PatientIdentity | dict[str, Any],
        request_data: dict[str, Any] | None = None,
        patient_id: str | None = None,
    ) -> Patient:
        """
        Create a patient in the request room.

        When request data names a requested exam, the request room is completed
        immediately through the same transition as a submitted request form.
        """
        if isinstance(identity, dict):
            identity = PatientIdentity.model_validate(identity)

        now = self.clock()
        patient = Patient(
            **identity.model_dump(),
            id=patient_id or generate_patient_id(),
            creation_date=now,
            current_room_id=RoomId.REQUEST,
            status_in_room=PatientStatusInRoom.WAITING,
        )
        ledger.append_entry(patient.history, RoomId.REQUEST, now, messages.PATIENT_CREATED)

        logger.info("Patient created", patient_id=patient.id)

        if request_data and request_data.get("requestedExam"):
            return self.submit_room_form(patient, RoomId.REQUEST, request_data)
        return patient

    # =========================================================================
    # Manual moves
    # =========================================================================

    def move_patient(self, patient: Patient, target_room_id: RoomId | str) -> Patient:
        """
        Move a patient to any room, bypassing pathway order.

        Raises:
            UnknownRoomError: target room is not configured
        """
        target = self.room_graph.get_room(target_room_id)

        working = patient.model_copy(deep=True)
        history = working.history
        source_room_id = working.current_room_id
        now = ledger.monotonic_now(history, self.clock())

        ledger.close_open_entry(history, source_room_id, now)
        ledger.append_entry(
            history,
            source_room_id,
            now,
            messages.moved_manually(target.name),
            closed=True,
        )
        ledger.append_entry(history, target.id, now + self.tie_break, messages.entered(target.name))

        working.current_room_id = target.id
        working.status_in_room = PatientStatusInRoom.WAITING

        logger.info(
            "Patient moved manually",
            patient_id=working.id,
            from_room_id=source_room_id.value,
            to_room_id=target.id.value,
        )
        return working
