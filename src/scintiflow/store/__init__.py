"""
Patient storage: in-memory repository, snapshot stores and the service that
ties them to the workflow engine.
"""

from scintiflow.store.repository import PatientRepository
from scintiflow.store.service import PatientService
from scintiflow.store.snapshot import (
    InMemorySnapshotStore,
    JsonSnapshotStore,
    SnapshotStore,
    dump_snapshot,
    parse_snapshot,
)

__all__ = [
    "InMemorySnapshotStore",
    "JsonSnapshotStore",
    "PatientRepository",
    "PatientService",
    "SnapshotStore",
    "dump_snapshot",
    "parse_snapshot",
]
