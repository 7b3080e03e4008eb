"""Workflow errors."""


class WorkflowError(Exception):
    """Base class for pathway errors."""
    pass


class ConfigurationError(WorkflowError):
    """Room graph is inconsistent or references an unknown room."""
    pass


class NotFoundError(WorkflowError):
    """A referenced entity does not exist."""
    pass


class UnknownRoomError(ConfigurationError, NotFoundError):
    """Room id has no entry in the room graph."""

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Unknown room: {room_id}")


class PatientNotFoundError(NotFoundError):
    """Patient id cannot be resolved."""

    def __init__(self, patient_id: str):
        self.patient_id = patient_id
        super().__init__(f"Patient not found: {patient_id}")


class InvalidTransitionError(WorkflowError):
    """Form submitted for a room the patient is not currently in."""

    def __init__(self, patient_id: str, room_id, current_room_id):
        self.patient_id = patient_id
        self.room_id = room_id
        self.current_room_id = current_room_id
        super().__init__(
            f"Patient {patient_id} is in {current_room_id}, cannot submit form for {room_id}"
        )


class SnapshotError(WorkflowError):
    """Stored snapshot cannot be read."""
    pass
