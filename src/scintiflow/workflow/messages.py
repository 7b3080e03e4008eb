"""
Ledger status messages.

Wording matches what existing snapshots contain; statistics rely on the
request completion prefix.
"""

from typing import Any

from scintiflow.models.core import RoomId
from scintiflow.models.exams import NOT_AVAILABLE

PATIENT_CREATED = "Patient créé."
ARCHIVED = "Dossier archivé."
REQUEST_COMPLETED_PREFIX = "Demande complétée pour"


def entered(room_name: str) -> str:
    return f"Entré dans {room_name}"


def moved_manually(room_name: str) -> str:
    return f"Déplacé manuellement vers {room_name}."


def completion_message(room_id: RoomId, room_data: dict[str, Any]) -> str:
    """Summary of what was recorded when a room form is submitted."""
    if room_id == RoomId.REQUEST:
        exam = room_data.get("requestedExam") or "examen non spécifié"
        return f"{REQUEST_COMPLETED_PREFIX} {exam}."
    if room_id == RoomId.APPOINTMENT:
        return (
            f"RDV planifié pour le {room_data.get('dateRdv') or NOT_AVAILABLE} "
            f"à {room_data.get('heureRdv') or NOT_AVAILABLE}."
        )
    if room_id == RoomId.CONSULTATION:
        return "Consultation terminée."
    if room_id == RoomId.INJECTION:
        # expects the normalized injection payload
        dose = room_data.get("dose") or NOT_AVAILABLE
        product = room_data.get("produitInjecte") or NOT_AVAILABLE
        return f"Injection de {dose} ({product}) enregistrée."
    if room_id == RoomId.EXAMINATION:
        return f"Examen saisi (Qualité: {room_data.get('qualiteImages') or NOT_AVAILABLE})."
    if room_id == RoomId.REPORT:
        return "Compte Rendu rédigé."
    if room_id == RoomId.WITHDRAWAL:
        return (
            f"Retrait CR effectué par {room_data.get('retirePar') or NOT_AVAILABLE}. "
            "Le dossier du patient a été archivé."
        )
    return "Action complétée."
