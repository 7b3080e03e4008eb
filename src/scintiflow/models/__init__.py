"""
scintiflow Data Models

Pydantic models for patients and their pathway ledger, plus the exam catalogue.
"""

from scintiflow.models.core import (
    HistoryEntry,
    Patient,
    PatientDocument,
    PatientIdentity,
    PatientStatusInRoom,
    ReferringEntity,
    RoomId,
)
from scintiflow.models.exams import (
    EXAM_PROFILES,
    ExamProfile,
    ScintigraphyExam,
    get_exam_profile,
    normalize_injection,
)

__all__ = [
    # Core
    "HistoryEntry",
    "Patient",
    "PatientDocument",
    "PatientIdentity",
    "PatientStatusInRoom",
    "ReferringEntity",
    "RoomId",
    # Exams
    "EXAM_PROFILES",
    "ExamProfile",
    "ScintigraphyExam",
    "get_exam_profile",
    "normalize_injection",
]
