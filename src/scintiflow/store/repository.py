"""Patient Repository - in-memory authoritative copy for a session"""
import structlog

from scintiflow.exceptions import PatientNotFoundError
from scintiflow.models.core import Patient, RoomId

logger = structlog.get_logger(__name__)


class PatientRepository:
    """
    Patients keyed by id, in insertion order.

    Stored objects are replaced wholesale, never mutated, matching the
    engine's copy-on-write updates.
    """

    def __init__(self, patients: list[Patient] | None = None):
        self._patients: dict[str, Patient] = {}
        for patient in patients or []:
            self._patients[patient.id] = patient

    def get(self, patient_id: str) -> Patient:
        """Get patient by ID; raises PatientNotFoundError."""
        try:
            return self._patients[patient_id]
        except KeyError:
            raise PatientNotFoundError(patient_id) from None

    def exists(self, patient_id: str) -> bool:
        return patient_id in self._patients

    def add(self, patient: Patient) -> None:
        if patient.id in self._patients:
            raise ValueError(f"Patient {patient.id} already exists")
        self._patients[patient.id] = patient

    def replace(self, patient: Patient) -> None:
        if patient.id not in self._patients:
            raise PatientNotFoundError(patient.id)
        self._patients[patient.id] = patient

    def all(self) -> list[Patient]:
        return list(self._patients.values())

    def __len__(self) -> int:
        return len(self._patients)

    def patients_in_room(self, room_id: RoomId) -> list[Patient]:
        return [p for p in self._patients.values() if p.current_room_id == room_id]

    def search(self, term: str) -> list[Patient]:
        """Case-insensitive substring match on name or id."""
        needle = term.strip().lower()
        if not needle:
            return []
        return [
            p for p in self._patients.values()
            if needle in p.name.lower() or needle in p.id.lower()
        ]

    def find_potential_duplicates(self, name: str, date_of_birth: str | None = None) -> list[Patient]:
        """
        Patients that may already be the person being registered.

        Matches on name and date of birth together, on a name longer than three
        characters alone, or on the date of birth alone.
        """
        lowered = name.strip().lower()
        if len(lowered) <= 2 and not date_of_birth:
            return []

        matches = []
        for patient in self._patients.values():
            name_match = bool(lowered) and lowered in patient.name.lower()
            dob_match = bool(date_of_birth) and patient.date_of_birth.isoformat() == date_of_birth
            if (name_match and dob_match) or (len(lowered) > 3 and name_match) or dob_match:
                matches.append(patient)
        return matches
