from datetime import date, datetime, timedelta, timezone

import pytest

from scintiflow.models.core import PatientIdentity
from scintiflow.store.service import PatientService
from scintiflow.store.snapshot import InMemorySnapshotStore
from scintiflow.workflow.engine import WorkflowEngine


class FakeClock:
    """Returns a fixed instant until advanced."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 7, 20, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def engine(clock):
    return WorkflowEngine(clock=clock)


@pytest.fixture
def identity():
    return PatientIdentity(name="Jean Dupont", date_of_birth=date(1965, 3, 15))


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
def service(engine, store):
    return PatientService(engine=engine, store=store)
