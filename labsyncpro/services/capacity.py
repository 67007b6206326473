from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from labsyncpro.models import (
    Computer,
    ComputerAssignment,
    Lab,
    Schedule,
    ScheduleStatus,
    SchoolClass,
    SeatAssignment,
)
from labsyncpro.schemas.capacity import CapacityOverview, ClassCapacity, LabCapacity

ACTIVE_STATUSES = (ScheduleStatus.SCHEDULED, ScheduleStatus.IN_PROGRESS)


def _percent(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def capacity_overview(session: Session, today: Optional[date] = None) -> CapacityOverview:
    """Per-lab computer occupancy for today's live schedules, plus per-class seating."""
    today = today or date.today()
    overview = CapacityOverview()

    labs = session.exec(select(Lab).where(Lab.is_active == True).order_by(Lab.name)).all()  # noqa: E712
    for lab in labs:
        functional = sum(1 for c in lab.computers if c.is_functional)
        occupied = session.exec(
            select(func.count(func.distinct(ComputerAssignment.computer_id)))
            .join(Schedule, ComputerAssignment.schedule_id == Schedule.id)
            .join(Computer, ComputerAssignment.computer_id == Computer.id)
            .where(
                Schedule.lab_id == lab.id,
                Schedule.scheduled_date == today,
                Schedule.status.in_(ACTIVE_STATUSES),
                Computer.is_functional == True,  # noqa: E712
            )
        ).one()
        overview.labs.append(LabCapacity(
            id=lab.id,
            name=lab.name,
            total_computers=functional,
            available_computers=functional - occupied,
            occupied_computers=occupied,
            capacity_percentage=_percent(occupied, functional),
        ))

    classes = session.exec(
        select(SchoolClass).where(SchoolClass.is_active == True).order_by(SchoolClass.name)  # noqa: E712
    ).all()
    for school_class in classes:
        assigned = session.exec(
            select(func.count(func.distinct(SeatAssignment.user_id)))
            .join(Schedule, SeatAssignment.schedule_id == Schedule.id)
            .where(Schedule.class_id == school_class.id)
        ).one()
        overview.classes.append(ClassCapacity(
            id=school_class.id,
            name=school_class.name,
            total_students=len(school_class.students),
            assigned_students=assigned,
            lab_assignment=school_class.lab.name if school_class.lab else None,
        ))

    overview.total_computers = sum(lab.total_computers for lab in overview.labs)
    overview.occupied_computers = sum(lab.occupied_computers for lab in overview.labs)
    overview.available_computers = overview.total_computers - overview.occupied_computers
    overview.overall_capacity = _percent(overview.occupied_computers, overview.total_computers)
    return overview
