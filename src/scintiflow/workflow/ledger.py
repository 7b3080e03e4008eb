"""
History Ledger

Helpers over a patient's append-only list of HistoryEntry. They operate on a
list that the caller already owns (the engine's working copy), so nothing here
touches the caller's original patient.
"""

from datetime import datetime, timedelta

from scintiflow.models.core import HistoryEntry, RoomId

DEFAULT_TIE_BREAK = timedelta(milliseconds=1)


def last_entry_date(history: list[HistoryEntry]) -> datetime | None:
    return history[-1].entry_date if history else None


def monotonic_now(history: list[HistoryEntry], now: datetime) -> datetime:
    """Clamp `now` so it never precedes the last appended entry."""
    last = last_entry_date(history)
    if last is not None and now < last:
        return last
    return now


def find_open_entry(history: list[HistoryEntry], room_id: RoomId) -> int | None:
    """Index of the most recent entry for `room_id` still lacking an exit date."""
    for index in range(len(history) - 1, -1, -1):
        entry = history[index]
        if entry.room_id == room_id and entry.exit_date is None:
            return index
    return None


def close_open_entry(history: list[HistoryEntry], room_id: RoomId, at: datetime) -> bool:
    """
    Close the latest open entry for a room.

    The entry is replaced by a copy so shared entry objects stay untouched.

    Returns:
        True if an entry was closed
    """
    index = find_open_entry(history, room_id)
    if index is None:
        return False
    history[index] = history[index].model_copy(update={"exit_date": at})
    return True


def append_entry(
    history: list[HistoryEntry],
    room_id: RoomId,
    at: datetime,
    status_message: str,
    closed: bool = False,
) -> HistoryEntry:
    """Append an entry at `at`; `closed` sets exit_date to the same instant."""
    entry = HistoryEntry(
        room_id=room_id,
        entry_date=at,
        exit_date=at if closed else None,
        status_message=status_message,
    )
    history.append(entry)
    return entry


def open_entries(history: list[HistoryEntry]) -> list[HistoryEntry]:
    return [entry for entry in history if entry.exit_date is None]


def is_monotonic(history: list[HistoryEntry]) -> bool:
    """True when entry dates never decrease."""
    return all(
        history[i].entry_date <= history[i + 1].entry_date
        for i in range(len(history) - 1)
    )
