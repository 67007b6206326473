"""Seat and computer assignments scoped to a schedule.

A seat, a computer, a student and a group each hold at most one assignment
per schedule. The unique constraints on the tables are the final word; the
pre-checks here exist to return a readable 409 before the insert.
"""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Session, select

from labsyncpro.models import (
    AssignmentType,
    Computer,
    ComputerAssignment,
    Group,
    GroupMember,
    Schedule,
    SchoolClass,
    Seat,
    SeatAssignment,
    User,
)
from labsyncpro.schemas.assignment import (
    ComputerAssignmentCreate,
    ComputerAssignmentRead,
    ComputerAssignmentUpdate,
    SeatAssignmentCreate,
    SeatAssignmentRead,
    SeatAssignmentUpdate,
)
from labsyncpro.schemas.capacity import StudentSeatInfo, UnassignedStudents
from labsyncpro.schemas.lab import ComputerStatusRead, SeatStatusRead
from labsyncpro.seating import generate_seat_name, seat_status, unassigned_students as _unassigned
from .catalog import get_active_lab
from .directory import enrolled_students, student_brief
from .errors import ConflictError, NotFoundError, ValidationFailed, commit_or_conflict, get_or_404

log = logging.getLogger(__name__)

SEAT_TAKEN = "Seat is already assigned for this schedule"
STUDENT_SEATED = "User already has a seat assignment for this schedule"
COMPUTER_TAKEN = "Computer is already assigned for this schedule"
GROUP_HAS_COMPUTER = "Group already has a computer assigned for this schedule"
STUDENT_HAS_COMPUTER = "User already has a computer assignment for this schedule"


def _now():
    return datetime.now(timezone.utc)


def _get_student(session: Session, user_id: uuid.UUID) -> User:
    user = session.get(User, user_id)
    if not user or user.role != "student":
        raise NotFoundError("Student not found")
    return user


def _taken(session: Session, model, schedule_id, column, value, exclude_id=None) -> bool:
    query = select(model).where(model.schedule_id == schedule_id, column == value)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    return session.exec(query).first() is not None


# Seats

def seat_assignment_read(assignment: SeatAssignment) -> SeatAssignmentRead:
    seat, student = assignment.seat, assignment.student
    return SeatAssignmentRead(
        id=assignment.id,
        schedule_id=assignment.schedule_id,
        user_id=assignment.user_id,
        seat_id=assignment.seat_id,
        seat_number=seat.seat_number,
        seat_name=generate_seat_name(seat.lab.name, seat.seat_number),
        first_name=student.first_name,
        last_name=student.last_name,
        student_code=student.student_code,
        student_name=student.full_name,
        assigned_at=assignment.assigned_at,
    )


def _check_seat(schedule: Schedule, seat: Seat) -> None:
    if seat.lab_id != schedule.lab_id:
        raise ValidationFailed("Seat does not belong to the schedule's lab")
    if not seat.is_available:
        raise ValidationFailed("Seat is under maintenance")


def create_seat_assignment(
    session: Session, data: SeatAssignmentCreate, assigned_by: Optional[User] = None
) -> SeatAssignment:
    schedule = get_or_404(session, Schedule, data.schedule_id, "Schedule not found")
    seat = get_or_404(session, Seat, data.seat_id, "Seat not found")
    _get_student(session, data.user_id)
    _check_seat(schedule, seat)

    if _taken(session, SeatAssignment, schedule.id, SeatAssignment.seat_id, seat.id):
        raise ConflictError(SEAT_TAKEN)
    if _taken(session, SeatAssignment, schedule.id, SeatAssignment.user_id, data.user_id):
        raise ConflictError(STUDENT_SEATED)

    assignment = SeatAssignment(
        schedule_id=schedule.id,
        user_id=data.user_id,
        seat_id=seat.id,
        assigned_by_id=assigned_by.id if assigned_by else None,
    )
    session.add(assignment)
    commit_or_conflict(session, SEAT_TAKEN)
    session.refresh(assignment)
    log.info("Seat %s assigned to %s for schedule %s", seat.seat_number, data.user_id, schedule.id)
    return assignment


def update_seat_assignment(
    session: Session, assignment_id: uuid.UUID, data: SeatAssignmentUpdate, assigned_by: Optional[User] = None
) -> SeatAssignment:
    assignment = get_or_404(session, SeatAssignment, assignment_id, "Seat assignment not found")
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationFailed("No fields to update")
    schedule = assignment.schedule

    if "seat_id" in changes:
        seat = get_or_404(session, Seat, changes["seat_id"], "Seat not found")
        _check_seat(schedule, seat)
        if _taken(session, SeatAssignment, schedule.id, SeatAssignment.seat_id, seat.id, exclude_id=assignment.id):
            raise ConflictError(SEAT_TAKEN)
        assignment.seat_id = seat.id
    if "user_id" in changes:
        _get_student(session, changes["user_id"])
        if _taken(session, SeatAssignment, schedule.id, SeatAssignment.user_id, changes["user_id"],
                  exclude_id=assignment.id):
            raise ConflictError(STUDENT_SEATED)
        assignment.user_id = changes["user_id"]

    assignment.assigned_at = _now()
    if assigned_by:
        assignment.assigned_by_id = assigned_by.id
    session.add(assignment)
    commit_or_conflict(session, SEAT_TAKEN)
    session.refresh(assignment)
    return assignment


def delete_seat_assignment(session: Session, assignment_id: uuid.UUID) -> None:
    assignment = get_or_404(session, SeatAssignment, assignment_id, "Seat assignment not found")
    session.delete(assignment)
    session.commit()
    log.info("Seat assignment %s removed", assignment_id)


def list_seat_assignments(
    session: Session, lab_id: uuid.UUID, schedule_id: Optional[uuid.UUID] = None
) -> List[SeatAssignment]:
    """Seat assignments in a lab, optionally narrowed to one schedule."""
    get_active_lab(session, lab_id)
    query = select(SeatAssignment).join(Seat, SeatAssignment.seat_id == Seat.id).where(Seat.lab_id == lab_id)
    if schedule_id:
        query = query.where(SeatAssignment.schedule_id == schedule_id)
    query = query.order_by(Seat.seat_number, SeatAssignment.assigned_at)
    return list(session.exec(query).all())


def unassigned_students(
    session: Session, class_id: uuid.UUID, lab_id: uuid.UUID, schedule_id: Optional[uuid.UUID] = None
) -> UnassignedStudents:
    school_class = get_or_404(session, SchoolClass, class_id, "Class not found")
    seated = {a.user_id for a in list_seat_assignments(session, lab_id, schedule_id)}
    students = [student_brief(u) for u in _unassigned(enrolled_students(school_class), seated)]
    return UnassignedStudents(unassigned_students=students, count=len(students))


def lab_seats_with_status(
    session: Session, lab_id: uuid.UUID, schedule_id: Optional[uuid.UUID] = None
) -> List[SeatStatusRead]:
    lab = get_active_lab(session, lab_id)
    by_seat = defaultdict(list)
    for a in list_seat_assignments(session, lab_id, schedule_id):
        by_seat[a.seat_id].append(a)

    rows = []
    for seat in lab.seats:
        base = dict(
            id=seat.id,
            lab_id=seat.lab_id,
            seat_number=seat.seat_number,
            is_available=seat.is_available,
            seat_name=generate_seat_name(lab.name, seat.seat_number),
        )
        assignments = by_seat.get(seat.id) or [None]
        for a in assignments:
            extra = {}
            if a is not None:
                extra = dict(
                    assignment_id=a.id,
                    schedule_id=a.schedule_id,
                    user_id=a.user_id,
                    first_name=a.student.first_name,
                    last_name=a.student.last_name,
                    student_code=a.student.student_code,
                )
            rows.append(SeatStatusRead(**base, **extra, status=seat_status(seat, a).value))
    return rows


# Computers

def computer_assignment_read(assignment: ComputerAssignment) -> ComputerAssignmentRead:
    computer = assignment.computer
    return ComputerAssignmentRead(
        id=assignment.id,
        schedule_id=assignment.schedule_id,
        computer_id=assignment.computer_id,
        computer_name=computer.computer_name,
        computer_number=computer.computer_number,
        assignment_type=assignment.assignment_type,
        group_id=assignment.group_id,
        group_name=assignment.group.name if assignment.group else None,
        user_id=assignment.user_id,
        student_name=assignment.student.full_name if assignment.student else None,
        assigned_at=assignment.assigned_at,
    )


def _check_computer(schedule: Schedule, computer: Computer) -> None:
    if computer.lab_id != schedule.lab_id:
        raise ValidationFailed("Computer does not belong to the schedule's lab")
    if not computer.is_functional:
        raise ValidationFailed("Computer is not functional")


def _check_group(session: Session, schedule: Schedule, group_id: uuid.UUID) -> Group:
    group = get_or_404(session, Group, group_id, "Group not found")
    if group.class_id != schedule.class_id:
        raise ValidationFailed("Group does not belong to the scheduled class")
    return group


def create_computer_assignment(
    session: Session, data: ComputerAssignmentCreate, assigned_by: Optional[User] = None
) -> ComputerAssignment:
    schedule = get_or_404(session, Schedule, data.schedule_id, "Schedule not found")
    computer = get_or_404(session, Computer, data.assigned_computer, "Computer not found")
    _check_computer(schedule, computer)

    if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.computer_id, computer.id):
        raise ConflictError(COMPUTER_TAKEN)
    if data.assignment_type == AssignmentType.GROUP:
        _check_group(session, schedule, data.group_id)
        if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.group_id, data.group_id):
            raise ConflictError(GROUP_HAS_COMPUTER)
    else:
        _get_student(session, data.user_id)
        if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.user_id, data.user_id):
            raise ConflictError(STUDENT_HAS_COMPUTER)

    assignment = ComputerAssignment(
        schedule_id=schedule.id,
        computer_id=computer.id,
        group_id=data.group_id,
        user_id=data.user_id,
        assignment_type=data.assignment_type,
        assigned_by_id=assigned_by.id if assigned_by else None,
    )
    session.add(assignment)
    commit_or_conflict(session, COMPUTER_TAKEN)
    session.refresh(assignment)
    log.info("Computer %s assigned for schedule %s", computer.computer_name, schedule.id)
    return assignment


def update_computer_assignment(
    session: Session, assignment_id: uuid.UUID, data: ComputerAssignmentUpdate,
    assigned_by: Optional[User] = None,
) -> ComputerAssignment:
    assignment = get_or_404(session, ComputerAssignment, assignment_id, "Computer assignment not found")
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationFailed("No fields to update")
    schedule = assignment.schedule

    if "computer_id" in changes:
        computer = get_or_404(session, Computer, changes["computer_id"], "Computer not found")
        _check_computer(schedule, computer)
        if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.computer_id, computer.id,
                  exclude_id=assignment.id):
            raise ConflictError(COMPUTER_TAKEN)
        assignment.computer_id = computer.id
    if "group_id" in changes:
        _check_group(session, schedule, changes["group_id"])
        if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.group_id, changes["group_id"],
                  exclude_id=assignment.id):
            raise ConflictError(GROUP_HAS_COMPUTER)
        assignment.group_id = changes["group_id"]
        assignment.user_id = None
        assignment.assignment_type = AssignmentType.GROUP
    if "user_id" in changes:
        _get_student(session, changes["user_id"])
        if _taken(session, ComputerAssignment, schedule.id, ComputerAssignment.user_id, changes["user_id"],
                  exclude_id=assignment.id):
            raise ConflictError(STUDENT_HAS_COMPUTER)
        assignment.user_id = changes["user_id"]
        assignment.group_id = None
        assignment.assignment_type = AssignmentType.INDIVIDUAL

    assignment.assigned_at = _now()
    if assigned_by:
        assignment.assigned_by_id = assigned_by.id
    session.add(assignment)
    commit_or_conflict(session, COMPUTER_TAKEN)
    session.refresh(assignment)
    return assignment


def delete_computer_assignment(session: Session, assignment_id: uuid.UUID) -> None:
    assignment = get_or_404(session, ComputerAssignment, assignment_id, "Computer assignment not found")
    session.delete(assignment)
    session.commit()
    log.info("Computer assignment %s removed", assignment_id)


def class_computer_assignments(
    session: Session, class_id: uuid.UUID, lab_id: Optional[uuid.UUID] = None
) -> List[ComputerAssignment]:
    get_or_404(session, SchoolClass, class_id, "Class not found")
    query = (
        select(ComputerAssignment)
        .join(Schedule, ComputerAssignment.schedule_id == Schedule.id)
        .join(Computer, ComputerAssignment.computer_id == Computer.id)
        .where(Schedule.class_id == class_id)
    )
    if lab_id:
        query = query.where(Schedule.lab_id == lab_id)
    query = query.order_by(Computer.computer_number, ComputerAssignment.assigned_at)
    return list(session.exec(query).all())


def lab_computers_with_status(
    session: Session, lab_id: uuid.UUID, schedule_id: Optional[uuid.UUID] = None
) -> List[ComputerStatusRead]:
    lab = get_active_lab(session, lab_id)
    query = (
        select(ComputerAssignment)
        .join(Computer, ComputerAssignment.computer_id == Computer.id)
        .where(Computer.lab_id == lab_id)
    )
    if schedule_id:
        query = query.where(ComputerAssignment.schedule_id == schedule_id)
    by_computer = defaultdict(list)
    for a in session.exec(query).all():
        by_computer[a.computer_id].append(a)

    rows = []
    for computer in lab.computers:
        for a in by_computer.get(computer.id) or [None]:
            row = ComputerStatusRead.model_validate(computer)
            if a is not None:
                row.assignment_id = a.id
                row.schedule_id = a.schedule_id
                row.group_id = a.group_id
                row.user_id = a.user_id
                row.group_name = a.group.name if a.group else None
                if a.student:
                    row.first_name = a.student.first_name
                    row.last_name = a.student.last_name
                    row.student_code = a.student.student_code
            rows.append(row)
    return rows


# Student view

def student_seat_info(session: Session, user: User) -> List[StudentSeatInfo]:
    """A student's seats, newest schedule first, with the computer they use there."""
    seats = session.exec(
        select(SeatAssignment)
        .join(Schedule, SeatAssignment.schedule_id == Schedule.id)
        .where(SeatAssignment.user_id == user.id)
        .order_by(Schedule.scheduled_date.desc(), SeatAssignment.assigned_at.desc())
    ).all()
    group_ids = set(session.exec(select(GroupMember.group_id).where(GroupMember.user_id == user.id)).all())

    info = []
    for a in seats:
        schedule, seat = a.schedule, a.seat
        computer = next(
            (c for c in schedule.computer_assignments if c.user_id == user.id or c.group_id in group_ids),
            None,
        )
        info.append(StudentSeatInfo(
            id=a.id,
            schedule_id=schedule.id,
            seat_number=seat.seat_number,
            seat_name=generate_seat_name(seat.lab.name, seat.seat_number),
            lab_name=seat.lab.name,
            lab_location=seat.lab.location,
            schedule_title=schedule.title,
            scheduled_date=schedule.scheduled_date,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            class_name=schedule.school_class.name if schedule.school_class else None,
            computer_id=computer.computer_id if computer else None,
            computer_name=computer.computer.computer_name if computer else None,
            computer_group_id=computer.group_id if computer else None,
            computer_group_name=computer.group.name if computer and computer.group else None,
        ))
    return info
