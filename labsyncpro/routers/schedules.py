import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import get_current_user, require_staff
from labsyncpro.models import Schedule, ScheduleStatus, User
from labsyncpro.schemas.schedule import ScheduleCreate, ScheduleRead, ScheduleResolve, ScheduleResolved
from labsyncpro.services import ledger, schedule_services
from labsyncpro.services.errors import get_or_404

router = APIRouter()


@router.get("")
async def list_schedules(
    class_id: Optional[uuid.UUID] = Query(default=None, alias="classId"),
    lab_id: Optional[uuid.UUID] = Query(default=None, alias="labId"),
    on_date: Optional[date] = Query(default=None, alias="date"),
    schedule_status: Optional[ScheduleStatus] = Query(default=None, alias="status"),
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    schedules = schedule_services.find_schedules(
        session, class_id=class_id, lab_id=lab_id, on_date=on_date, status=schedule_status
    )
    return {"schedules": [ScheduleRead.model_validate(s) for s in schedules]}


@router.post("/resolve", response_model=ScheduleResolved)
async def resolve_schedule(
    payload: ScheduleResolve,
    response: Response,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    """Return the class's schedule in the lab, creating the capacity-planning default if none exists."""
    schedule, created = schedule_services.resolve_or_create_schedule(
        session, payload.class_id, payload.lab_id, created_by=current_user
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ScheduleResolved(schedule=ScheduleRead.model_validate(schedule), created=created)


@router.get("/{schedule_id}")
async def get_schedule(
    schedule_id: uuid.UUID,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    schedule = get_or_404(session, Schedule, schedule_id, "Schedule not found")
    return {
        "schedule": ScheduleRead.model_validate(schedule),
        "seat_assignments": [ledger.seat_assignment_read(a) for a in schedule.seat_assignments],
        "computer_assignments": [ledger.computer_assignment_read(a) for a in schedule.computer_assignments],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_schedule(
    payload: ScheduleCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    schedule = schedule_services.create_schedule(session, payload, created_by=current_user)
    return {"message": "Schedule created successfully", "schedule": ScheduleRead.model_validate(schedule)}
