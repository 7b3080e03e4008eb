"""
Patient Service

Resolves patients by id, runs workflow transitions and writes a snapshot after
each successful mutation. The engine itself stays free of persistence.
"""

from datetime import date, datetime, timedelta
from typing import Any

import structlog

from scintiflow.analytics.durations import SegmentDuration, chained_segment_durations
from scintiflow.analytics.statistics import (
    ActivityItem,
    AverageDelay,
    Period,
    activity_feed,
    average_segment_delays,
    exam_type_counts,
)
from scintiflow.analytics.worklist import TimelineEvent, daily_worklist
from scintiflow.config import Settings, get_settings
from scintiflow.models.core import Patient, PatientIdentity, RoomId
from scintiflow.store.repository import PatientRepository
from scintiflow.store.snapshot import InMemorySnapshotStore, JsonSnapshotStore, SnapshotStore
from scintiflow.workflow.engine import WorkflowEngine

logger = structlog.get_logger(__name__)


class PatientService:
    """Application-level entry point used by the HTTP layer and scripts."""

    def __init__(
        self,
        engine: WorkflowEngine | None = None,
        store: SnapshotStore | None = None,
        repository: PatientRepository | None = None,
    ):
        self.engine = engine or WorkflowEngine()
        self.store = store or InMemorySnapshotStore()
        self.repository = repository if repository is not None else PatientRepository(self.store.load())

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PatientService":
        """Build a service backed by the configured JSON snapshot."""
        settings = settings or get_settings()
        workflow = settings.workflow
        engine = WorkflowEngine(
            tie_break=timedelta(milliseconds=workflow.tie_break_ms),
            enforce_current_room=workflow.enforce_current_room,
        )
        return cls(engine=engine, store=JsonSnapshotStore(workflow.snapshot_path))

    # =========================================================================
    # Mutations
    # =========================================================================

    def _commit(self, previous: Patient | None, updated: Patient) -> Patient:
        """Store the updated patient and persist; roll back if persisting fails."""
        if previous is None:
            self.repository.add(updated)
        else:
            self.repository.replace(updated)

        try:
            self.store.save(self.repository.all())
        except Exception:
            logger.exception("Snapshot write failed, rolling back", patient_id=updated.id)
            if previous is None:
                self.repository = PatientRepository(
                    [p for p in self.repository.all() if p.id != updated.id]
                )
            else:
                self.repository.replace(previous)
            raise
        return updated

    def create_patient(
        self,
        identity: PatientIdentity | dict[str, Any],
        request_data: dict[str, Any] | None = None,
    ) -> Patient:
        patient = self.engine.create_patient(identity, request_data)
        return self._commit(None, patient)

    def submit_room_form(self, patient_id: str, room_id: RoomId | str, form_data: dict[str, Any]) -> Patient:
        previous = self.repository.get(patient_id)
        updated = self.engine.submit_room_form(previous, room_id, form_data)
        return self._commit(previous, updated)

    def move_patient(self, patient_id: str, target_room_id: RoomId | str) -> Patient:
        previous = self.repository.get(patient_id)
        updated = self.engine.move_patient(previous, target_room_id)
        return self._commit(previous, updated)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_patient(self, patient_id: str) -> Patient:
        return self.repository.get(patient_id)

    def list_patients(self, room_id: RoomId | None = None) -> list[Patient]:
        if room_id is not None:
            return self.repository.patients_in_room(room_id)
        return self.repository.all()

    def search(self, term: str) -> list[Patient]:
        return self.repository.search(term)

    def find_potential_duplicates(self, name: str, date_of_birth: str | None = None) -> list[Patient]:
        return self.repository.find_potential_duplicates(name, date_of_birth)

    def segment_durations(self, patient_id: str) -> list[SegmentDuration]:
        return chained_segment_durations(self.repository.get(patient_id).history)

    def average_delays(self, period: Period, now: datetime | None = None) -> list[AverageDelay]:
        return average_segment_delays(self.repository.all(), period, now or self.engine.clock())

    def exam_counts(self, period: Period, now: datetime | None = None) -> list[tuple[str, int]]:
        return exam_type_counts(self.repository.all(), period, now or self.engine.clock())

    def activity(self, period: Period, now: datetime | None = None, limit: int | None = None) -> list[ActivityItem]:
        return activity_feed(
            self.repository.all(),
            period,
            now or self.engine.clock(),
            room_graph=self.engine.room_graph,
            limit=limit,
        )

    def worklist(self, day: date | None = None) -> list[TimelineEvent]:
        return daily_worklist(self.repository.all(), day or self.engine.clock().date())
