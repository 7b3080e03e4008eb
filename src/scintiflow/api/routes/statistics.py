"""
Statistics Routes

Department-level views: average delays, exam counts, activity feed, daily
worklist and the room configuration.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from scintiflow.analytics.statistics import Period
from scintiflow.api.deps import get_service
from scintiflow.store.service import PatientService

router = APIRouter(tags=["Statistics"])


# =============================================================================
# Response Models
# =============================================================================

class AverageDelayResponse(BaseModel):
    label: str
    average_ms: float | None = None
    count: int
    display: str


class ExamCountResponse(BaseModel):
    exam: str
    count: int


class StatisticsResponse(BaseModel):
    """Delays and exam volume for one period."""
    period: Period
    average_delays: list[AverageDelayResponse]
    exam_counts: list[ExamCountResponse]


class ActivityResponse(BaseModel):
    patient_id: str
    patient_name: str
    room_id: str
    room_name: str
    timestamp: str
    status_message: str


class WorklistEventResponse(BaseModel):
    id: str
    time: str
    patient_id: str
    patient_name: str
    type: str
    description: str


class RoomResponse(BaseModel):
    id: str
    name: str
    description: str
    next_room_id: str | None = None
    patient_stage: bool
    patient_count: int = 0


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    period: Period = Query(default=Period.TODAY, description="today, this_week or this_month"),
    service: PatientService = Depends(get_service),
):
    """Average inter-room delays and exam counts."""
    delays = service.average_delays(period)
    counts = service.exam_counts(period)
    return StatisticsResponse(
        period=period,
        average_delays=[
            AverageDelayResponse(
                label=delay.label,
                average_ms=delay.average_ms,
                count=delay.count,
                display=delay.display,
            )
            for delay in delays
        ],
        exam_counts=[ExamCountResponse(exam=exam, count=count) for exam, count in counts],
    )


@router.get("/activity", response_model=list[ActivityResponse])
async def get_activity(
    period: Period = Query(default=Period.TODAY),
    limit: int | None = Query(default=None, ge=1, le=500),
    service: PatientService = Depends(get_service),
):
    """Most recent room visits, newest first."""
    return [
        ActivityResponse(
            patient_id=item.patient_id,
            patient_name=item.patient_name,
            room_id=item.room_id.value,
            room_name=item.room_name,
            timestamp=item.timestamp.isoformat(),
            status_message=item.status_message,
        )
        for item in service.activity(period, limit=limit)
    ]


@router.get("/worklist", response_model=list[WorklistEventResponse])
async def get_worklist(
    day: date | None = Query(default=None, description="ISO date, defaults to today"),
    service: PatientService = Depends(get_service),
):
    """Appointments, injections and examinations for one day."""
    return [
        WorklistEventResponse(
            id=event.id,
            time=event.time,
            patient_id=event.patient_id,
            patient_name=event.patient_name,
            type=event.type.value,
            description=event.description,
        )
        for event in service.worklist(day)
    ]


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(service: PatientService = Depends(get_service)):
    """Configured rooms in pathway order, with current occupancy."""
    rooms = service.engine.room_graph.ordered_rooms()
    return [
        RoomResponse(
            id=room.id.value,
            name=room.name,
            description=room.description,
            next_room_id=room.next_room_id.value if room.next_room_id else None,
            patient_stage=room.patient_stage,
            patient_count=len(service.list_patients(room.id)),
        )
        for room in rooms
    ]
