import pytest

from scintiflow.exceptions import ConfigurationError, NotFoundError, UnknownRoomError
from scintiflow.models.core import RoomId
from scintiflow.workflow.rooms import DEFAULT_ROOMS, Room, RoomGraph, get_room_graph


def test_default_pathway_order():
    graph = get_room_graph()

    assert [room.id for room in graph.patient_rooms()] == [
        RoomId.REQUEST,
        RoomId.APPOINTMENT,
        RoomId.CONSULTATION,
        RoomId.INJECTION,
        RoomId.EXAMINATION,
        RoomId.REPORT,
        RoomId.WITHDRAWAL,
        RoomId.ARCHIVE,
    ]
    assert RoomId.GENERATOR not in [room.id for room in graph.patient_rooms()]
    assert len(graph.rooms()) == len(DEFAULT_ROOMS)


def test_ordered_rooms_put_hot_lab_after_pathway():
    ordered = [room.id for room in get_room_graph().ordered_rooms()]

    assert ordered == [room.id for room in get_room_graph().patient_rooms()] + [RoomId.GENERATOR]
    assert ordered.index(RoomId.INJECTION) == ordered.index(RoomId.CONSULTATION) + 1


def test_terminal_rooms():
    graph = get_room_graph()

    assert graph.is_terminal(RoomId.ARCHIVE)
    assert graph.is_terminal(RoomId.GENERATOR)
    assert not graph.is_terminal(RoomId.WITHDRAWAL)
    assert graph.next_room(RoomId.WITHDRAWAL) == RoomId.ARCHIVE


def test_lookup_accepts_wire_values():
    graph = get_room_graph()

    assert graph.get_room("INJECTION").id == RoomId.INJECTION
    assert graph.room_name("EXAMEN") == "Examen"
    assert "COMPTE_RENDU" in graph
    assert "NOWHERE" not in graph


def test_unknown_room_is_configuration_and_not_found_error():
    with pytest.raises(UnknownRoomError) as exc_info:
        get_room_graph().get_room("NOWHERE")

    assert isinstance(exc_info.value, ConfigurationError)
    assert isinstance(exc_info.value, NotFoundError)
    assert exc_info.value.room_id == "NOWHERE"


def test_dangling_next_room_rejected():
    rooms = [Room(id=RoomId.REQUEST, name="Accueil", next_room_id=RoomId.APPOINTMENT)]

    with pytest.raises(ConfigurationError):
        RoomGraph(rooms)


def test_duplicate_room_rejected():
    rooms = [
        Room(id=RoomId.ARCHIVE, name="Archives"),
        Room(id=RoomId.ARCHIVE, name="Archives bis"),
    ]

    with pytest.raises(ConfigurationError):
        RoomGraph(rooms)


def test_cycle_rejected():
    rooms = [
        Room(id=RoomId.REPORT, name="Compte Rendu", next_room_id=RoomId.WITHDRAWAL),
        Room(id=RoomId.WITHDRAWAL, name="Retrait", next_room_id=RoomId.REPORT),
    ]

    with pytest.raises(ConfigurationError):
        RoomGraph(rooms)
