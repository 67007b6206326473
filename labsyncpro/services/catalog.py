from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from labsyncpro.models import Lab, Schedule, SchoolClass
from labsyncpro.schemas.classroom import ClassRead
from labsyncpro.schemas.lab import ComputerRead, LabDetail, LabRead, SeatRead
from labsyncpro.seating import generate_seat_name
from .errors import NotFoundError


def lab_read(lab: Lab) -> LabRead:
    return LabRead(
        id=lab.id,
        name=lab.name,
        location=lab.location,
        total_computers=lab.total_computers,
        total_seats=lab.total_seats,
        functional_computers=sum(1 for c in lab.computers if c.is_functional),
        available_seats=sum(1 for s in lab.seats if s.is_available),
    )


def seat_read(lab: Lab, seat) -> SeatRead:
    return SeatRead(
        id=seat.id,
        lab_id=seat.lab_id,
        seat_number=seat.seat_number,
        is_available=seat.is_available,
        seat_name=generate_seat_name(lab.name, seat.seat_number),
    )


def list_labs(session: Session) -> list[LabRead]:
    labs = session.exec(select(Lab).where(Lab.is_active == True).order_by(Lab.name)).all()  # noqa: E712
    return [lab_read(lab) for lab in labs]


def get_active_lab(session: Session, lab_id: uuid.UUID) -> Lab:
    lab = session.get(Lab, lab_id)
    if not lab or not lab.is_active:
        raise NotFoundError("Lab not found")
    return lab


def get_lab_detail(session: Session, lab_id: uuid.UUID) -> LabDetail:
    lab = get_active_lab(session, lab_id)
    return LabDetail(
        **lab_read(lab).model_dump(),
        computers=[ComputerRead.model_validate(c) for c in lab.computers],
        seats=[seat_read(lab, s) for s in lab.seats],
    )


def class_read(school_class: SchoolClass) -> ClassRead:
    return ClassRead(
        id=school_class.id,
        name=school_class.name,
        grade=school_class.grade,
        stream=school_class.stream,
        section=school_class.section,
        description=school_class.description,
        capacity=school_class.capacity,
        lab_id=school_class.lab_id,
        group_count=len(school_class.groups),
        student_count=len(school_class.students),
        schedule_count=len(school_class.schedules),
    )


def list_classes(
    session: Session,
    lab_id: Optional[uuid.UUID] = None,
    grade: Optional[int] = None,
    stream: Optional[str] = None,
) -> list[ClassRead]:
    """Active classes; with a lab, those homed there or already scheduled in it."""
    query = select(SchoolClass).where(SchoolClass.is_active == True)  # noqa: E712
    if lab_id:
        scheduled_here = select(Schedule.class_id).where(Schedule.lab_id == lab_id)
        query = query.where(or_(SchoolClass.lab_id == lab_id, SchoolClass.id.in_(scheduled_here)))
    if grade is not None:
        query = query.where(SchoolClass.grade == grade)
    if stream:
        query = query.where(SchoolClass.stream == stream)
    classes = session.exec(query.order_by(SchoolClass.name)).all()
    return [class_read(c) for c in classes]
