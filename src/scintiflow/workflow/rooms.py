"""
Room Graph

Static, immutable description of the department's rooms. Each room points to
its successor; following the links from any room must end on a terminal room.
"""

from pydantic import BaseModel, ConfigDict

from scintiflow.exceptions import ConfigurationError, UnknownRoomError
from scintiflow.models.core import RoomId


class Room(BaseModel):
    """A stage of the clinical pathway."""

    model_config = ConfigDict(frozen=True)

    id: RoomId
    name: str
    description: str = ""
    next_room_id: RoomId | None = None
    patient_stage: bool = True

    @property
    def is_terminal(self) -> bool:
        return self.next_room_id is None


DEFAULT_ROOMS: tuple[Room, ...] = (
    Room(
        id=RoomId.REQUEST,
        name="Accueil et Demandes",
        description="Création des patients et enregistrement des demandes d'examens.",
        next_room_id=RoomId.APPOINTMENT,
    ),
    Room(
        id=RoomId.APPOINTMENT,
        name="Rendez-vous",
        description="Planification et gestion des rendez-vous.",
        next_room_id=RoomId.CONSULTATION,
    ),
    Room(
        id=RoomId.CONSULTATION,
        name="Consultation",
        description="Consultations pré-examen avec les médecins.",
        next_room_id=RoomId.INJECTION,
    ),
    Room(
        id=RoomId.GENERATOR,
        name="Gestion Labo Chaud",
        description="Gestion des produits radiopharmaceutiques, lots et préparations.",
        patient_stage=False,
    ),
    Room(
        id=RoomId.INJECTION,
        name="Injection",
        description="Administration des traceurs aux patients.",
        next_room_id=RoomId.EXAMINATION,
    ),
    Room(
        id=RoomId.EXAMINATION,
        name="Examen",
        description="Réalisation des examens de médecine nucléaire.",
        next_room_id=RoomId.REPORT,
    ),
    Room(
        id=RoomId.REPORT,
        name="Compte Rendu",
        description="Rédaction et validation des comptes rendus.",
        next_room_id=RoomId.WITHDRAWAL,
    ),
    Room(
        id=RoomId.WITHDRAWAL,
        name="Retrait CR et Sortie",
        description="Remise du compte rendu au patient et finalisation du dossier.",
        next_room_id=RoomId.ARCHIVE,
    ),
    Room(
        id=RoomId.ARCHIVE,
        name="Archives",
        description="Dossiers des patients archivés.",
    ),
)


class RoomGraph:
    """
    Lookup over the configured rooms.

    The graph is validated on construction: duplicate ids, dangling
    `next_room_id` references and cycles raise ConfigurationError.
    """

    def __init__(self, rooms: tuple[Room, ...] | list[Room] = DEFAULT_ROOMS):
        self._rooms: dict[RoomId, Room] = {}
        for room in rooms:
            if room.id in self._rooms:
                raise ConfigurationError(f"Duplicate room id: {room.id.value}")
            self._rooms[room.id] = room
        self._validate()

    def _validate(self) -> None:
        for room in self._rooms.values():
            if room.next_room_id is not None and room.next_room_id not in self._rooms:
                raise ConfigurationError(
                    f"Room {room.id.value} points to unknown room {room.next_room_id.value}"
                )

        # every chain must end within len(rooms) hops
        for start in self._rooms:
            current = start
            for _ in range(len(self._rooms)):
                current = self._rooms[current].next_room_id
                if current is None:
                    break
            else:
                raise ConfigurationError(f"Cycle in room graph starting at {start.value}")

    def get_room(self, room_id: RoomId | str) -> Room:
        """Get a room by id; raises UnknownRoomError."""
        try:
            return self._rooms[RoomId(room_id)]
        except (KeyError, ValueError):
            raise UnknownRoomError(room_id) from None

    def next_room(self, room_id: RoomId | str) -> RoomId | None:
        return self.get_room(room_id).next_room_id

    def is_terminal(self, room_id: RoomId | str) -> bool:
        return self.get_room(room_id).is_terminal

    def room_name(self, room_id: RoomId | str) -> str:
        return self.get_room(room_id).name

    def rooms(self) -> list[Room]:
        """All rooms in configuration order."""
        return list(self._rooms.values())

    def patient_rooms(self) -> list[Room]:
        """Main sequence in pathway order, starting from REQUEST."""
        ordered: list[Room] = []
        current: RoomId | None = RoomId.REQUEST if RoomId.REQUEST in self._rooms else None
        while current is not None:
            room = self._rooms[current]
            ordered.append(room)
            current = room.next_room_id
        return ordered

    def ordered_rooms(self) -> list[Room]:
        """Patient pathway first, then rooms outside it in configuration order."""
        pathway = self.patient_rooms()
        seen = {room.id for room in pathway}
        return pathway + [room for room in self._rooms.values() if room.id not in seen]

    def __contains__(self, room_id) -> bool:
        try:
            return RoomId(room_id) in self._rooms
        except ValueError:
            return False


_default_graph: RoomGraph | None = None


def get_room_graph() -> RoomGraph:
    """Process-wide graph built from DEFAULT_ROOMS."""
    global _default_graph
    if _default_graph is None:
        _default_graph = RoomGraph()
    return _default_graph
