from datetime import timedelta

import pytest

from scintiflow.exceptions import InvalidTransitionError, UnknownRoomError
from scintiflow.models.core import PatientStatusInRoom, RoomId
from scintiflow.workflow import ledger
from scintiflow.workflow.engine import WorkflowEngine

BONE = "Scintigraphie Osseuse"

PATHWAY_FORMS = [
    (RoomId.APPOINTMENT, {"dateRdv": "2024-07-20", "heureRdv": "08:30"}),
    (RoomId.CONSULTATION, {"boneData": {"indication": "Bilan d'extension"}}),
    (RoomId.INJECTION, {"coldMolecule": "HMDP", "injectedActivity": "740 MBq", "injectionTime": "09:15"}),
    (RoomId.EXAMINATION, {"qualiteImages": "Bonne"}),
    (RoomId.REPORT, {"conclusion": "RAS"}),
    (RoomId.WITHDRAWAL, {"retirePar": "Patient"}),
]


def walk(engine, clock, patient, forms=PATHWAY_FORMS):
    for room_id, form in forms:
        clock.advance(minutes=10)
        patient = engine.submit_room_form(patient, room_id, form)
    return patient


def test_create_patient_without_request_data(engine, identity):
    patient = engine.create_patient(identity)

    assert patient.id.startswith("PAT")
    assert len(patient.id) == 11
    assert patient.current_room_id == RoomId.REQUEST
    assert patient.status_in_room == PatientStatusInRoom.WAITING
    assert len(patient.history) == 1
    assert patient.history[0].exit_date is None
    assert patient.history[0].status_message == "Patient créé."


def test_submit_request_form_moves_to_appointment(engine, clock, identity):
    patient = engine.create_patient(identity)
    clock.advance(minutes=5)

    updated = engine.submit_room_form(patient, RoomId.REQUEST, {"requestedExam": BONE})

    assert updated.current_room_id == RoomId.APPOINTMENT
    assert updated.status_in_room == PatientStatusInRoom.WAITING
    assert len(updated.history) == 3
    assert updated.history[0].exit_date == clock.now
    completion, appointment = updated.history[1:]
    assert completion.room_id == RoomId.REQUEST
    assert completion.status_message == f"Demande complétée pour {BONE}."
    assert completion.exit_date == completion.entry_date
    assert appointment.room_id == RoomId.APPOINTMENT
    assert appointment.exit_date is None
    assert appointment.entry_date == clock.now + timedelta(milliseconds=1)
    assert updated.room_specific_data[RoomId.REQUEST]["requestedExam"] == BONE


def test_create_patient_with_exam_completes_request(engine, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE, "notes": "urgent"})

    assert patient.current_room_id == RoomId.APPOINTMENT
    assert patient.requested_exam == BONE
    assert patient.room_data(RoomId.REQUEST)["notes"] == "urgent"
    assert len(patient.history) == 3


def test_create_patient_ignores_request_data_without_exam(engine, identity):
    patient = engine.create_patient(identity, {"notes": "à compléter"})

    assert patient.current_room_id == RoomId.REQUEST
    assert patient.room_specific_data == {}


def test_appointment_form_is_stored(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    clock.advance(minutes=3)

    updated = engine.submit_room_form(patient, RoomId.APPOINTMENT, {"dateRdv": "2024-07-20", "heureRdv": "08:30"})

    assert updated.current_room_id == RoomId.CONSULTATION
    assert updated.room_data(RoomId.APPOINTMENT) == {"dateRdv": "2024-07-20", "heureRdv": "08:30"}
    assert updated.history[-2].status_message == "RDV planifié pour le 2024-07-20 à 08:30."


def test_injection_writes_consultation_and_normalized_payload(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    patient = walk(engine, clock, patient, PATHWAY_FORMS[:3])

    assert patient.current_room_id == RoomId.EXAMINATION
    bone = patient.room_data(RoomId.CONSULTATION)["boneData"]
    assert bone["indication"] == "Bilan d'extension"
    assert bone["injectionDetails"] == {
        "coldMolecule": "HMDP",
        "injectedActivity": "740 MBq",
        "injectionTime": "09:15",
    }
    assert patient.room_data(RoomId.INJECTION) == {
        "produitInjecte": "HMDP",
        "dose": "740 MBq",
        "heureInjection": "09:15",
        "voieAdministration": "N/A",
    }
    assert patient.history[-2].status_message == "Injection de 740 MBq (HMDP) enregistrée."


def test_injection_parathyroid_fields(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": "Scintigraphie Parathyroïdienne"})
    patient = walk(engine, clock, patient, PATHWAY_FORMS[:2])
    patient = engine.submit_room_form(
        patient,
        RoomId.INJECTION,
        {"mibiInjectedActivity": "600 MBq", "injectionTimeMIBI": "10:00"},
    )

    injection = patient.room_data(RoomId.INJECTION)
    assert injection["produitInjecte"] == "MIBI"
    assert injection["dose"] == "600 MBq"
    assert injection["heureInjection"] == "10:00"
    assert "injectionDetails" in patient.room_data(RoomId.CONSULTATION)["parathyroidData"]


def test_injection_without_known_exam_skips_consultation(clock, identity):
    engine = WorkflowEngine(clock=clock, enforce_current_room=False)
    patient = engine.create_patient(identity)

    updated = engine.submit_room_form(patient, RoomId.INJECTION, {"injectedActivity": "300 MBq"})

    assert RoomId.CONSULTATION not in updated.room_specific_data
    assert updated.room_data(RoomId.INJECTION)["dose"] == "300 MBq"
    assert updated.current_room_id == RoomId.EXAMINATION
    assert ledger.find_open_entry(updated.history, RoomId.REQUEST) is None


def test_full_pathway_archives_patient(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    patient = walk(engine, clock, patient)

    assert patient.current_room_id == RoomId.ARCHIVE
    assert patient.status_in_room == PatientStatusInRoom.SEEN
    assert ledger.open_entries(patient.history) == []
    assert patient.history[-1].status_message == "Dossier archivé."
    assert patient.history[-2].status_message.startswith("Retrait CR effectué par Patient.")
    assert ledger.is_monotonic(patient.history)


def test_history_invariants_hold_after_every_step(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    for room_id, form in PATHWAY_FORMS:
        patient = engine.submit_room_form(patient, room_id, form)
        assert len(ledger.open_entries(patient.history)) <= 1
        assert ledger.is_monotonic(patient.history)


def test_clock_going_backwards_is_clamped(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    clock.advance(hours=-2)

    updated = engine.submit_room_form(patient, RoomId.APPOINTMENT, {})

    assert ledger.is_monotonic(updated.history)


def test_submit_returns_copy(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    before = patient.model_copy(deep=True)
    clock.advance(minutes=1)

    updated = engine.submit_room_form(patient, RoomId.APPOINTMENT, {"dateRdv": "2024-07-21"})

    assert updated is not patient
    assert patient == before


def test_submit_for_other_room_is_rejected(engine, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})

    with pytest.raises(InvalidTransitionError) as exc_info:
        engine.submit_room_form(patient, RoomId.INJECTION, {})

    assert exc_info.value.current_room_id == RoomId.APPOINTMENT
    assert patient.current_room_id == RoomId.APPOINTMENT


def test_backfill_allowed_when_not_enforced(clock, identity):
    engine = WorkflowEngine(clock=clock, enforce_current_room=False)
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    clock.advance(minutes=1)

    updated = engine.submit_room_form(patient, RoomId.CONSULTATION, {"boneData": {}})

    assert updated.current_room_id == RoomId.INJECTION
    assert ledger.find_open_entry(updated.history, RoomId.APPOINTMENT) is None
    assert len(ledger.open_entries(updated.history)) == 1


def test_unknown_room_raises(engine, identity):
    patient = engine.create_patient(identity)

    with pytest.raises(UnknownRoomError):
        engine.submit_room_form(patient, "SALLE_INCONNUE", {})
    with pytest.raises(UnknownRoomError):
        engine.move_patient(patient, "SALLE_INCONNUE")


def test_move_patient_backwards(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    patient = walk(engine, clock, patient, PATHWAY_FORMS[:3])
    assert patient.current_room_id == RoomId.EXAMINATION
    clock.advance(minutes=2)

    moved = engine.move_patient(patient, RoomId.INJECTION)

    assert moved.current_room_id == RoomId.INJECTION
    assert moved.status_in_room == PatientStatusInRoom.WAITING
    manual = moved.history[-2]
    assert manual.room_id == RoomId.EXAMINATION
    assert manual.status_message == "Déplacé manuellement vers Injection."
    assert manual.exit_date == clock.now
    assert moved.history[-1].room_id == RoomId.INJECTION
    assert moved.history[-1].exit_date is None
    assert len(ledger.open_entries(moved.history)) == 1
    assert ledger.find_open_entry(moved.history, RoomId.EXAMINATION) is None


def test_moved_patient_can_continue(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    patient = walk(engine, clock, patient, PATHWAY_FORMS[:3])
    patient = engine.move_patient(patient, RoomId.INJECTION)
    clock.advance(minutes=5)

    patient = engine.submit_room_form(patient, RoomId.INJECTION, {"injectedActivity": "500 MBq"})

    assert patient.current_room_id == RoomId.EXAMINATION
    assert patient.room_data(RoomId.INJECTION)["dose"] == "500 MBq"
    assert len(ledger.open_entries(patient.history)) == 1


def test_injection_resubmission_keeps_earlier_values(engine, clock, identity):
    patient = engine.create_patient(identity, {"requestedExam": BONE})
    patient = walk(engine, clock, patient, PATHWAY_FORMS[:2])
    patient = engine.submit_room_form(
        patient,
        RoomId.INJECTION,
        {"coldMolecule": "HMDP", "injectedActivity": "740 MBq", "injectionTime": "09:15", "injectionPoint": "Bras gauche"},
    )
    patient = engine.move_patient(patient, RoomId.INJECTION)
    clock.advance(minutes=5)

    patient = engine.submit_room_form(patient, RoomId.INJECTION, {"injectedActivity": "500 MBq"})

    assert patient.room_data(RoomId.INJECTION) == {
        "produitInjecte": "HMDP",
        "dose": "500 MBq",
        "heureInjection": "09:15",
        "voieAdministration": "Bras gauche",
    }
    assert patient.history[-2].status_message == "Injection de 500 MBq (HMDP) enregistrée."
