"""
Duration Calculator

Elapsed time between pathway stages, read from a patient's history ledger.

A segment (A -> B) runs from the latest exit of room A to the first entry of
room B after it. Segments are evaluated in chain: each one only looks at
timestamps after the previous segment's end, so return trips never produce
negative or double-counted durations.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

from scintiflow.models.core import HistoryEntry, RoomId
from scintiflow.models.exams import NOT_AVAILABLE

Edge = Literal["entry", "exit"]


class SegmentStatus(str, Enum):
    COMPLETE = "complete"
    AWAITING_EXIT = "awaiting_exit"
    AWAITING_ENTRY = "awaiting_entry"


@dataclass(frozen=True)
class DelaySegment:
    """Pair of rooms whose transit time is measured."""
    start_room: RoomId
    end_room: RoomId
    label: str


DELAY_SEGMENTS: tuple[DelaySegment, ...] = (
    DelaySegment(RoomId.CONSULTATION, RoomId.INJECTION, "Consultation → Injection"),
    DelaySegment(RoomId.INJECTION, RoomId.EXAMINATION, "Injection → Examen"),
    DelaySegment(RoomId.EXAMINATION, RoomId.REPORT, "Examen → Compte Rendu"),
    DelaySegment(RoomId.REPORT, RoomId.WITHDRAWAL, "Compte Rendu → Retrait CR"),
)


@dataclass(frozen=True)
class SegmentDuration:
    """Result of measuring one segment for one patient."""
    segment: DelaySegment
    status: SegmentStatus
    start: datetime | None = None
    end: datetime | None = None

    @property
    def duration_ms(self) -> int | None:
        if self.start is None or self.end is None:
            return None
        return calculate_time_diff(self.start, self.end)

    @property
    def is_complete(self) -> bool:
        return self.status == SegmentStatus.COMPLETE

    @property
    def display(self) -> str:
        duration = self.duration_ms
        return format_duration(duration) if duration is not None else NOT_AVAILABLE


def find_time_from_history(
    history: list[HistoryEntry],
    room_id: RoomId,
    edge: Edge,
    after: datetime | None = None,
) -> datetime | None:
    """
    Find a boundary timestamp for a room.

    Args:
        history: Patient ledger
        room_id: Room to look at
        edge: "exit" returns the latest exit date, "entry" the earliest entry date
        after: Only consider timestamps strictly later than this

    Returns:
        The timestamp, or None when the room has no matching visit
    """
    entries = [entry for entry in history if entry.room_id == room_id]

    if edge == "entry":
        candidates = [
            entry.entry_date for entry in entries
            if after is None or entry.entry_date > after
        ]
        return min(candidates) if candidates else None

    candidates = [
        entry.exit_date for entry in entries
        if entry.exit_date is not None and (after is None or entry.exit_date > after)
    ]
    return max(candidates) if candidates else None


def calculate_time_diff(start: datetime | None, end: datetime | None) -> int | None:
    """Milliseconds from start to end, None if either is missing."""
    if start is None or end is None:
        return None
    return (end - start) // timedelta(milliseconds=1)


def segment_duration(
    history: list[HistoryEntry],
    segment: DelaySegment,
    after: datetime | None = None,
) -> SegmentDuration:
    """Measure a single segment, only considering timestamps after `after`."""
    start = find_time_from_history(history, segment.start_room, "exit", after)
    if start is None:
        return SegmentDuration(segment, SegmentStatus.AWAITING_EXIT)

    end = find_time_from_history(history, segment.end_room, "entry", start)
    if end is None:
        return SegmentDuration(segment, SegmentStatus.AWAITING_ENTRY, start=start)

    return SegmentDuration(segment, SegmentStatus.COMPLETE, start=start, end=end)


def chained_segment_durations(
    history: list[HistoryEntry],
    segments: tuple[DelaySegment, ...] | list[DelaySegment] = DELAY_SEGMENTS,
) -> list[SegmentDuration]:
    """
    Measure consecutive segments, each starting after the previous one ended.

    When a segment has a start but no end yet, the next segment is searched
    after that start.
    """
    results: list[SegmentDuration] = []
    cursor: datetime | None = None

    for segment in segments:
        result = segment_duration(history, segment, cursor)
        results.append(result)
        if result.end is not None:
            cursor = result.end
        elif result.start is not None:
            cursor = result.start

    return results


def format_duration(ms: float) -> str:
    """Format milliseconds as e.g. "1h 5m", "20m 1s" or "0s"."""
    total_seconds = int(round(ms / 1000))
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)

    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes or (hours and seconds):
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return sign + " ".join(parts)
