"""
Snapshot Stores

Full-snapshot persistence of the patient list. After every mutation the whole
list is written; on start-up it is read back verbatim.
"""

from pathlib import Path
from typing import Any, Protocol
import json
import os
import tempfile

import structlog
from pydantic import ValidationError

from scintiflow.exceptions import SnapshotError
from scintiflow.models.core import Patient

logger = structlog.get_logger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotStore(Protocol):
    """Where patient snapshots are kept."""

    def load(self) -> list[Patient]:
        ...

    def save(self, patients: list[Patient]) -> None:
        ...


def dump_snapshot(patients: list[Patient]) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "patients": [patient.to_snapshot() for patient in patients],
    }


def parse_snapshot(data: Any) -> list[Patient]:
    """
    Parse a snapshot document.

    A bare list of patients (the format written by the browser tool) is
    accepted as well as the versioned envelope.
    """
    records = data.get("patients", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise SnapshotError("Snapshot does not contain a patient list")
    try:
        return [Patient.from_snapshot(record) for record in records]
    except ValidationError as e:
        raise SnapshotError(f"Invalid patient record in snapshot: {e}") from e


class InMemorySnapshotStore:
    """Keeps the last snapshot as a document in memory."""

    def __init__(self, initial: list[Patient] | None = None):
        self.document: dict[str, Any] = dump_snapshot(initial or [])
        self.save_count = 0

    def load(self) -> list[Patient]:
        return parse_snapshot(self.document)

    def save(self, patients: list[Patient]) -> None:
        self.document = dump_snapshot(patients)
        self.save_count += 1


class JsonSnapshotStore:
    """
    JSON file snapshot store.

    Writes go to a temporary file in the same directory which is then renamed
    over the snapshot, so a crash mid-write keeps the previous snapshot.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> list[Patient]:
        if not self.path.exists():
            logger.info("No snapshot found, starting empty", path=str(self.path))
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Corrupt snapshot {self.path}: {e}") from e

        patients = parse_snapshot(data)
        logger.info("Snapshot loaded", path=str(self.path), patients=len(patients))
        return patients

    def save(self, patients: list[Patient]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = dump_snapshot(patients)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug("Snapshot written", path=str(self.path), patients=len(patients))
