from datetime import datetime, timedelta, timezone

from scintiflow.analytics.durations import (
    DELAY_SEGMENTS,
    SegmentStatus,
    calculate_time_diff,
    chained_segment_durations,
    find_time_from_history,
    format_duration,
    segment_duration,
)
from scintiflow.models.core import HistoryEntry, RoomId


def at(hour, minute=0, second=0, ms=0):
    return datetime(2024, 7, 20, hour, minute, second, ms * 1000, tzinfo=timezone.utc)


def visit(room_id, entry, exit=None, message="visite"):
    return HistoryEntry(room_id=room_id, entry_date=entry, exit_date=exit, status_message=message)


def test_consultation_to_injection_20m_1s():
    history = [
        visit(RoomId.CONSULTATION, at(9, 40), at(10, 0)),
        visit(RoomId.INJECTION, at(10, 20, 1)),
    ]

    result = segment_duration(history, DELAY_SEGMENTS[0])

    assert result.status == SegmentStatus.COMPLETE
    assert result.duration_ms == 1_201_000
    assert result.display == "20m 1s"


def test_missing_end_is_not_available():
    history = [visit(RoomId.CONSULTATION, at(9, 40), at(10, 0))]

    result = segment_duration(history, DELAY_SEGMENTS[0])

    assert result.status == SegmentStatus.AWAITING_ENTRY
    assert result.start == at(10, 0)
    assert result.duration_ms is None
    assert result.display == "N/A"


def test_missing_start_is_not_available():
    result = segment_duration([visit(RoomId.INJECTION, at(10))], DELAY_SEGMENTS[0])

    assert result.status == SegmentStatus.AWAITING_EXIT
    assert result.display == "N/A"


def test_find_time_edges():
    history = [
        visit(RoomId.INJECTION, at(9), at(9, 10)),
        visit(RoomId.INJECTION, at(11), at(11, 5)),
    ]

    assert find_time_from_history(history, RoomId.INJECTION, "entry") == at(9)
    assert find_time_from_history(history, RoomId.INJECTION, "exit") == at(11, 5)
    assert find_time_from_history(history, RoomId.INJECTION, "entry", after=at(9)) == at(11)
    assert find_time_from_history(history, RoomId.EXAMINATION, "entry") is None


def test_chained_segments_do_not_overlap():
    history = [
        visit(RoomId.CONSULTATION, at(8), at(8, 30)),
        visit(RoomId.INJECTION, at(8, 30, ms=1), at(8, 45)),
        visit(RoomId.EXAMINATION, at(9, 30), at(10)),
        visit(RoomId.REPORT, at(10, 0, ms=1), at(14)),
        visit(RoomId.WITHDRAWAL, at(16)),
    ]

    results = chained_segment_durations(history)

    assert all(result.is_complete for result in results)
    for previous, current in zip(results, results[1:]):
        assert previous.end <= current.start
    assert [result.display for result in results] == ["0s", "45m", "0s", "2h"]


def test_chaining_ignores_earlier_visits_after_return_trip():
    history = [
        visit(RoomId.CONSULTATION, at(8), at(8, 30)),
        visit(RoomId.INJECTION, at(8, 40), at(8, 50)),
        visit(RoomId.EXAMINATION, at(9), at(9, 5)),
        visit(RoomId.INJECTION, at(9, 10), at(9, 20)),
        visit(RoomId.EXAMINATION, at(9, 30)),
    ]

    consultation_injection, injection_examination, *_ = chained_segment_durations(history)

    assert consultation_injection.end == at(8, 40)
    assert injection_examination.start == at(9, 20)
    assert injection_examination.end == at(9, 30)
    assert injection_examination.duration_ms >= 0


def test_durations_are_idempotent():
    history = [
        visit(RoomId.CONSULTATION, at(8), at(8, 30)),
        visit(RoomId.INJECTION, at(9)),
    ]

    assert chained_segment_durations(history) == chained_segment_durations(history)


def test_calculate_time_diff():
    assert calculate_time_diff(at(10), at(10, 0, 0, 250)) == 250
    assert calculate_time_diff(None, at(10)) is None


def test_format_duration():
    assert format_duration(0) == "0s"
    assert format_duration(1_201_000) == "20m 1s"
    assert format_duration(7_200_000) == "2h"
    assert format_duration(3_601_000) == "1h 0m 1s"
    assert format_duration(timedelta(minutes=-5) / timedelta(milliseconds=1)) == "-5m"
