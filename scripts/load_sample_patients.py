#!/usr/bin/env python3
"""
scintiflow Sample Data Loader

Generates patients, walks each one part-way through the pathway on a simulated
clock, and writes the result to a JSON snapshot.

Usage:
    python scripts/load_sample_patients.py

    # Or with options
    python scripts/load_sample_patients.py --patients 20 --output data/patients.json
"""
import argparse
import random
from datetime import date, datetime, timedelta, timezone

from scintiflow.config import get_settings
from scintiflow.models.core import PatientIdentity, RoomId
from scintiflow.models.exams import EXAM_PROFILES, ScintigraphyExam
from scintiflow.observability.logging import configure_logging
from scintiflow.store.service import PatientService
from scintiflow.store.snapshot import JsonSnapshotStore
from scintiflow.workflow.engine import WorkflowEngine


# =============================================================================
# Sample Data Generators
# =============================================================================

FIRST_NAMES = ["Jean", "Marie", "Pierre", "Sophie", "Luc", "Claire", "Paul", "Camille",
               "Louis", "Julie", "Hugo", "Emma", "Nicolas", "Léa", "Thomas", "Chloé"]

LAST_NAMES = ["Dupont", "Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit",
              "Durand", "Leroy", "Moreau", "Simon", "Laurent", "Lefebvre", "Michel", "Garcia"]

REFERRERS = [
    {"type": "doctor", "name": "Dr. Lambert", "contactNumber": "0102030405"},
    {"type": "service", "name": "Service de Rhumatologie"},
    {"type": "center", "name": "Centre d'Oncologie du Parc", "contactEmail": "onco@parc.example"},
]

COLD_MOLECULES = {
    ScintigraphyExam.BONE: "HMDP",
    ScintigraphyExam.PARATHYROID: "MIBI",
    ScintigraphyExam.RENAL_DMSA: "DMSA",
    ScintigraphyExam.RENAL_DTPA_MAG3: "MAG3",
    ScintigraphyExam.THYROID: "Pertechnétate",
}


class SimulatedClock:
    """Clock that moves forward by a random number of minutes on each call."""

    def __init__(self, start: datetime, max_step_minutes: int = 45):
        self.current = start
        self.max_step_minutes = max_step_minutes

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=random.randint(1, self.max_step_minutes))
        return self.current


def generate_identity() -> PatientIdentity:
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return PatientIdentity(
        name=f"{first} {last}",
        date_of_birth=date(random.randint(1935, 2015), random.randint(1, 12), random.randint(1, 28)),
        phone=f"06{random.randint(10000000, 99999999)}",
        email=f"{first.lower()}.{last.lower()}@example.org",
        referring_entity=random.choice(REFERRERS),
    )


def room_forms(exam: ScintigraphyExam, day: date) -> dict[RoomId, dict]:
    """Form payloads submitted in each room for one patient."""
    profile = EXAM_PROFILES[exam]
    injection_time = f"{random.randint(8, 16):02d}:{random.choice(['00', '15', '30', '45'])}"

    if exam == ScintigraphyExam.PARATHYROID:
        injection = {"mibiInjectedActivity": f"{random.randint(500, 740)} MBq", "injectionTimeMIBI": injection_time}
    else:
        injection = {"injectedActivity": f"{random.randint(150, 740)} MBq", "injectionTime": injection_time}
    injection["coldMolecule"] = COLD_MOLECULES[exam]
    injection["injectionPoint"] = random.choice(["Bras gauche", "Bras droit"])

    return {
        RoomId.APPOINTMENT: {
            "dateRdv": day.isoformat(),
            "heureRdv": f"{random.randint(8, 12):02d}:00",
        },
        RoomId.CONSULTATION: {profile.consultation_key: {"clinicalContext": "Bilan"}},
        RoomId.INJECTION: injection,
        RoomId.EXAMINATION: {"qualiteImages": random.choice(["Bonne", "Moyenne", "Excellente"])},
        RoomId.REPORT: {"conclusion": "Examen sans particularité."},
        RoomId.WITHDRAWAL: {"retirePar": random.choice(["Patient", "Famille", "Médecin"])},
    }


PATHWAY = [
    RoomId.APPOINTMENT,
    RoomId.CONSULTATION,
    RoomId.INJECTION,
    RoomId.EXAMINATION,
    RoomId.REPORT,
    RoomId.WITHDRAWAL,
]


def load_patients(service: PatientService, count: int, day: date) -> int:
    """Create `count` patients and advance each a random number of rooms."""
    for _ in range(count):
        exam = random.choice(list(ScintigraphyExam))
        patient = service.create_patient(generate_identity(), {"requestedExam": exam.value})
        forms = room_forms(exam, day)

        for room_id in PATHWAY[:random.randint(0, len(PATHWAY))]:
            patient = service.submit_room_form(patient.id, room_id, forms[room_id])

        print(f"  {patient.id}  {exam.value:<32} -> {patient.current_room_id.value}")
    return count


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    parser = argparse.ArgumentParser(description="Generate sample patients into a scintiflow snapshot")
    parser.add_argument("--patients", type=int, default=10, help="Number of patients to generate")
    parser.add_argument("--output", type=str, help="Snapshot path (defaults to the configured one)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible data")

    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    settings = get_settings()
    configure_logging(settings.workflow.log_level, json_output=False)

    now = datetime.now(timezone.utc)
    start = now.replace(hour=7, minute=0, second=0, microsecond=0)
    engine = WorkflowEngine(
        clock=SimulatedClock(start),
        tie_break=timedelta(milliseconds=settings.workflow.tie_break_ms),
    )
    store = JsonSnapshotStore(args.output or settings.workflow.snapshot_path)
    service = PatientService(engine=engine, store=store)

    print(f"Generating {args.patients} patients into {store.path}...")
    load_patients(service, args.patients, start.date())

    print("\nSample data loaded successfully!")
    print(f"  Patients in snapshot: {len(service.repository)}")


if __name__ == "__main__":
    main()
