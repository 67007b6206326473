"""Schedule lookup, the capacity-planning resolve-or-create, and scheduling."""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from labsyncpro.config import settings
from labsyncpro.models import Schedule, ScheduleStatus, SchoolClass, User
from labsyncpro.schemas.schedule import ScheduleConflict, ScheduleCreate, ScheduleRead, SuggestedSlot
from .catalog import get_active_lab
from .errors import ConflictError, NotFoundError, commit_or_conflict

log = logging.getLogger(__name__)

CAPACITY_DESCRIPTION = "Auto-generated schedule for capacity planning"
SUGGESTION_FIRST_HOUR = 8
SUGGESTION_LAST_HOUR = 18
MAX_SUGGESTIONS = 3


class ScheduleConflictError(ConflictError):
    def __init__(self, conflict: ScheduleConflict):
        super().__init__(conflict.error)
        self.conflict = conflict


def find_schedules(
    session: Session,
    class_id: Optional[uuid.UUID] = None,
    lab_id: Optional[uuid.UUID] = None,
    on_date: Optional[date] = None,
    status: Optional[ScheduleStatus] = None,
) -> List[Schedule]:
    query = select(Schedule)
    if class_id:
        query = query.where(Schedule.class_id == class_id)
    if lab_id:
        query = query.where(Schedule.lab_id == lab_id)
    if on_date:
        query = query.where(Schedule.scheduled_date == on_date)
    if status:
        query = query.where(Schedule.status == status)
    query = query.order_by(Schedule.scheduled_date, Schedule.start_time, Schedule.created_at, Schedule.id)
    return list(session.exec(query).all())


def first_schedule(session: Session, class_id: uuid.UUID, lab_id: uuid.UUID) -> Optional[Schedule]:
    """The schedule capacity planning works against: earliest live slot wins."""
    schedules = find_schedules(session, class_id=class_id, lab_id=lab_id)
    return next((s for s in schedules if s.status != ScheduleStatus.CANCELLED), None)


def resolve_or_create_schedule(
    session: Session,
    class_id: uuid.UUID,
    lab_id: uuid.UUID,
    created_by: Optional[User] = None,
    today: Optional[date] = None,
) -> tuple[Schedule, bool]:
    """Return ``(schedule, created)`` for the (class, lab) pair.

    Repeated or concurrent calls converge on a single schedule: the insert
    lands on ``uq_schedule_class_lab_slot``, and the loser of a race re-reads
    the winner's row.
    """
    school_class = session.get(SchoolClass, class_id)
    if not school_class:
        raise NotFoundError("Class not found")
    get_active_lab(session, lab_id)

    existing = first_schedule(session, class_id, lab_id)
    if existing:
        return existing, False

    schedule = Schedule(
        title=f"Capacity Planning - {school_class.name}",
        description=CAPACITY_DESCRIPTION,
        class_id=class_id,
        lab_id=lab_id,
        scheduled_date=today or date.today(),
        start_time=settings.CAPACITY_START_TIME,
        end_time=settings.CAPACITY_END_TIME,
        created_by_id=created_by.id if created_by else None,
    )
    session.add(schedule)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        existing = first_schedule(session, class_id, lab_id)
        if existing is None:
            # The default slot is held by a cancelled schedule.
            raise ConflictError(
                "The default capacity planning slot is taken by a cancelled schedule"
            ) from exc
        log.info("Capacity schedule for class %s in lab %s created concurrently", class_id, lab_id)
        return existing, False
    session.refresh(schedule)
    log.info("Created capacity schedule %s for class %s in lab %s", schedule.id, class_id, lab_id)
    return schedule, True


def _overlapping(session: Session, lab_id: uuid.UUID, on_date: date, start: time, end: time) -> List[Schedule]:
    query = select(Schedule).where(
        Schedule.lab_id == lab_id,
        Schedule.scheduled_date == on_date,
        Schedule.status != ScheduleStatus.CANCELLED,
        Schedule.start_time < end,
        Schedule.end_time > start,
    ).order_by(Schedule.start_time)
    return list(session.exec(query).all())


def suggest_slots(session: Session, lab_id: uuid.UUID, on_date: date, duration: timedelta) -> List[SuggestedSlot]:
    """Free hourly slots of the requested length between 08:00 and 18:00."""
    slots: List[SuggestedSlot] = []
    for hour in range(SUGGESTION_FIRST_HOUR, SUGGESTION_LAST_HOUR + 1):
        start = datetime.combine(on_date, time(hour, 0))
        end = start + duration
        if end.date() != on_date:
            break
        if not _overlapping(session, lab_id, on_date, start.time(), end.time()):
            slots.append(SuggestedSlot(start_time=start.strftime("%H:%M"), end_time=end.strftime("%H:%M")))
        if len(slots) == MAX_SUGGESTIONS:
            break
    return slots


def create_schedule(session: Session, data: ScheduleCreate, created_by: Optional[User] = None) -> Schedule:
    if not session.get(SchoolClass, data.class_id):
        raise NotFoundError("Class not found")
    get_active_lab(session, data.lab_id)

    conflicts = _overlapping(session, data.lab_id, data.scheduled_date, data.start_time, data.end_time)
    if conflicts:
        duration = datetime.combine(data.scheduled_date, data.end_time) - datetime.combine(
            data.scheduled_date, data.start_time
        )
        suggestions = suggest_slots(session, data.lab_id, data.scheduled_date, duration)
        raise ScheduleConflictError(ScheduleConflict(
            error="Schedule conflict detected",
            conflicting_schedules=[ScheduleRead.model_validate(s) for s in conflicts],
            suggested_times=suggestions or None,
            message="The lab is already booked during the requested time",
        ))

    schedule = Schedule(
        **data.model_dump(),
        created_by_id=created_by.id if created_by else None,
    )
    session.add(schedule)
    commit_or_conflict(session, "A schedule already exists for this class and lab at that time")
    session.refresh(schedule)
    log.info("Created schedule %s (%s)", schedule.id, schedule.title)
    return schedule
