"""
Core Domain Models

Pydantic models for Patient, HistoryEntry and the identity data captured at intake.
Field aliases are camelCase so snapshots written by earlier versions of the
department tool load without translation.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Age in full years at `today`."""
    today = today or date.today()
    return today.year - date_of_birth.year - (
        (today.month, today.day) < (date_of_birth.month, date_of_birth.day)
    )


def as_utc(value: datetime) -> datetime:
    """Naive timestamps from older snapshots are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RoomId(str, Enum):
    """Rooms of the nuclear-medicine pathway (wire values are stored in snapshots)."""
    REQUEST = "DEMANDE"
    APPOINTMENT = "RENDEZVOUS"
    CONSULTATION = "CONSULTATION"
    GENERATOR = "GENERATEUR"  # hot lab, not a patient stage
    INJECTION = "INJECTION"
    EXAMINATION = "EXAMEN"
    REPORT = "COMPTE_RENDU"
    WITHDRAWAL = "RETRAIT_CR_SORTIE"
    ARCHIVE = "ARCHIVE"


class PatientStatusInRoom(str, Enum):
    """Status of a patient inside their current room."""
    WAITING = "En attente"
    SEEN = "Traité(e)"


class SnapshotModel(BaseModel):
    """
    Base class for everything that travels through a snapshot.

    Keys a model does not declare are kept and written back, so records
    from earlier versions survive a load and save unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ReferringEntity(SnapshotModel):
    """Service, center or doctor that referred the patient."""

    type: Literal["service", "center", "doctor"] = "doctor"
    name: str
    contact_number: str | None = None
    contact_email: str | None = None


class PatientDocument(SnapshotModel):
    """Attachment metadata. Content is carried opaquely."""

    id: str
    name: str
    file_type: str
    upload_date: datetime
    data_url: str


class HistoryEntry(SnapshotModel):
    """
    One visit record in a patient's ledger.

    An entry is open while `exit_date` is None. Once closed it is never
    reopened.
    """

    room_id: RoomId
    entry_date: datetime
    exit_date: datetime | None = None
    status_message: str

    @property
    def is_open(self) -> bool:
        return self.exit_date is None


class PatientIdentity(SnapshotModel):
    """Identity and contact data supplied by the intake collaborator."""

    # intake input, not a stored record
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, description="Full name")
    date_of_birth: date = Field(..., description="Date of birth")
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    referring_entity: ReferringEntity | None = None


class Patient(PatientIdentity):
    """
    Patient aggregate.

    Mutated only through the workflow engine, which always works on a copy.
    `room_specific_data` holds one opaque payload per room ever visited.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Patient identifier (PATxxxxxxxx)")
    creation_date: datetime
    current_room_id: RoomId = RoomId.REQUEST
    status_in_room: PatientStatusInRoom = PatientStatusInRoom.WAITING
    history: list[HistoryEntry] = Field(default_factory=list)
    room_specific_data: dict[RoomId, dict[str, Any]] = Field(default_factory=dict)
    documents: list[PatientDocument] | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_stored_age(cls, data: Any) -> Any:
        # age is always recomputed from the date of birth
        if isinstance(data, dict) and "age" in data:
            data = {key: value for key, value in data.items() if key != "age"}
        return data

    @computed_field
    @property
    def age(self) -> int:
        """Calculate current age."""
        return calculate_age(self.date_of_birth)

    @property
    def requested_exam(self) -> str | None:
        """Exam recorded in the request room, if any."""
        return self.room_specific_data.get(RoomId.REQUEST, {}).get("requestedExam") or None

    def room_data(self, room_id: RoomId) -> dict[str, Any]:
        """Payload stored for a room (empty dict when the room was never submitted)."""
        return self.room_specific_data.get(room_id, {})

    def to_snapshot(self) -> dict[str, Any]:
        """Structural JSON-ready dump with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "Patient":
        return cls.model_validate(data)
