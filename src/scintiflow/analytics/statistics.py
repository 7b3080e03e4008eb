"""
Department Statistics

Aggregates over all patients for a reporting period: average inter-room
delays, requested exam counts and the activity feed.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from scintiflow.analytics.durations import (
    DELAY_SEGMENTS,
    DelaySegment,
    chained_segment_durations,
    format_duration,
)
from scintiflow.models.core import HistoryEntry, Patient, RoomId, as_utc
from scintiflow.models.exams import NOT_AVAILABLE
from scintiflow.workflow.messages import REQUEST_COMPLETED_PREFIX
from scintiflow.workflow.rooms import RoomGraph, get_room_graph


class Period(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"


def is_date_in_period(timestamp: datetime, period: Period, now: datetime) -> bool:
    """
    Check whether a timestamp falls in the period containing `now`.

    Weeks follow ISO numbering (Monday start). Both datetimes are compared in
    the timezone of `now`.
    """
    timestamp = as_utc(timestamp)
    if now.tzinfo is not None:
        timestamp = timestamp.astimezone(now.tzinfo)

    day = timestamp.date()
    reference = now.date()

    if period == Period.TODAY:
        return day == reference
    if period == Period.THIS_WEEK:
        return day.isocalendar()[:2] == reference.isocalendar()[:2]
    return (day.year, day.month) == (reference.year, reference.month)


# =============================================================================
# Delays
# =============================================================================

@dataclass(frozen=True)
class AverageDelay:
    label: str
    average_ms: float | None
    count: int

    @property
    def display(self) -> str:
        return format_duration(self.average_ms) if self.average_ms is not None else NOT_AVAILABLE


def average_segment_delays(
    patients: list[Patient],
    period: Period,
    now: datetime,
    segments: tuple[DelaySegment, ...] = DELAY_SEGMENTS,
) -> list[AverageDelay]:
    """
    Average completed segment durations whose end falls in the period.

    Each patient's segments are chained independently.
    """
    samples: dict[str, list[int]] = {segment.label: [] for segment in segments}

    for patient in patients:
        for result in chained_segment_durations(patient.history, segments):
            if not result.is_complete or not is_date_in_period(result.end, period, now):
                continue
            samples[result.segment.label].append(result.duration_ms)

    averages = []
    for segment in segments:
        values = samples[segment.label]
        averages.append(
            AverageDelay(
                label=segment.label,
                average_ms=sum(values) / len(values) if values else None,
                count=len(values),
            )
        )
    return averages


# =============================================================================
# Exams
# =============================================================================

def exam_type_counts(patients: list[Patient], period: Period, now: datetime) -> list[tuple[str, int]]:
    """Requested exams whose request was completed in the period, most frequent first."""
    counts: Counter[str] = Counter()
    prefix = REQUEST_COMPLETED_PREFIX.lower()

    for patient in patients:
        exam = patient.requested_exam
        if not exam:
            continue
        completed = any(
            entry.room_id == RoomId.REQUEST
            and entry.status_message.lower().startswith(prefix)
            and is_date_in_period(entry.entry_date, period, now)
            for entry in patient.history
        )
        if completed:
            counts[exam] += 1

    return counts.most_common()


# =============================================================================
# Activity feed
# =============================================================================

@dataclass(frozen=True)
class ActivityItem:
    patient_id: str
    patient_name: str
    room_id: RoomId
    room_name: str
    timestamp: datetime
    status_message: str


def activity_feed(
    patients: list[Patient],
    period: Period,
    now: datetime,
    room_graph: RoomGraph | None = None,
    limit: int | None = None,
) -> list[ActivityItem]:
    """All ledger entries recorded in the period, newest first."""
    room_graph = room_graph or get_room_graph()
    items: list[ActivityItem] = []

    for patient in patients:
        for entry in patient.history:
            if not is_date_in_period(entry.entry_date, period, now):
                continue
            items.append(_activity_item(patient, entry, room_graph))

    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit] if limit is not None else items


def _activity_item(patient: Patient, entry: HistoryEntry, room_graph: RoomGraph) -> ActivityItem:
    room_name = room_graph.room_name(entry.room_id) if entry.room_id in room_graph else entry.room_id.value
    return ActivityItem(
        patient_id=patient.id,
        patient_name=patient.name,
        room_id=entry.room_id,
        room_name=room_name,
        timestamp=entry.entry_date,
        status_message=entry.status_message,
    )
