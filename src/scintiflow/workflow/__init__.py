"""
Patient pathway workflow: room graph, history ledger and transition engine.
"""

from scintiflow.workflow.engine import WorkflowEngine, generate_patient_id, utc_now
from scintiflow.workflow.rooms import DEFAULT_ROOMS, Room, RoomGraph, get_room_graph

__all__ = [
    "DEFAULT_ROOMS",
    "Room",
    "RoomGraph",
    "WorkflowEngine",
    "generate_patient_id",
    "get_room_graph",
    "utc_now",
]
