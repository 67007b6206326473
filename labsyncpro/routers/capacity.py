import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import get_current_user, require_staff, require_student
from labsyncpro.models import User
from labsyncpro.schemas.assignment import (
    ComputerAssignmentCreate,
    ComputerAssignmentUpdate,
    SeatAssignmentCreate,
    SeatAssignmentUpdate,
)
from labsyncpro.services import capacity as capacity_service
from labsyncpro.services import directory, ledger

router = APIRouter()


@router.get("")
async def overview(session: Session = Depends(get_session), _: User = Depends(require_staff)):
    return capacity_service.capacity_overview(session)


@router.get("/labs/{lab_id}/computers")
async def lab_computers(
    lab_id: uuid.UUID,
    schedule_id: Optional[uuid.UUID] = Query(default=None, alias="scheduleId"),
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    return {"computers": ledger.lab_computers_with_status(session, lab_id, schedule_id)}


@router.get("/labs/{lab_id}/seats")
async def lab_seats(
    lab_id: uuid.UUID,
    schedule_id: Optional[uuid.UUID] = Query(default=None, alias="scheduleId"),
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    return {"seats": ledger.lab_seats_with_status(session, lab_id, schedule_id)}


@router.get("/labs/{lab_id}/seat-assignments")
async def lab_seat_assignments(
    lab_id: uuid.UUID,
    schedule_id: Optional[uuid.UUID] = Query(default=None, alias="scheduleId"),
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    """Without a schedule this lists every assignment in the lab."""
    rows = ledger.list_seat_assignments(session, lab_id, schedule_id)
    return {"seat_assignments": [ledger.seat_assignment_read(a) for a in rows]}


@router.post("/seat-assignments", status_code=status.HTTP_201_CREATED)
async def create_seat_assignment(
    payload: SeatAssignmentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    assignment = ledger.create_seat_assignment(session, payload, assigned_by=current_user)
    return {"message": "Seat assigned successfully", "assignment": ledger.seat_assignment_read(assignment)}


@router.put("/seat-assignments/{assignment_id}")
async def update_seat_assignment(
    assignment_id: uuid.UUID,
    payload: SeatAssignmentUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    assignment = ledger.update_seat_assignment(session, assignment_id, payload, assigned_by=current_user)
    return {"message": "Seat assignment updated successfully", "assignment": ledger.seat_assignment_read(assignment)}


@router.delete("/seat-assignments/{assignment_id}")
async def delete_seat_assignment(
    assignment_id: uuid.UUID,
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    ledger.delete_seat_assignment(session, assignment_id)
    return {"message": "Seat assignment removed successfully"}


@router.post("/computer-assignments", status_code=status.HTTP_201_CREATED)
async def create_computer_assignment(
    payload: ComputerAssignmentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    assignment = ledger.create_computer_assignment(session, payload, assigned_by=current_user)
    return {"message": "Computer assigned successfully", "assignment": ledger.computer_assignment_read(assignment)}


@router.put("/computer-assignments/{assignment_id}")
async def update_computer_assignment(
    assignment_id: uuid.UUID,
    payload: ComputerAssignmentUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    assignment = ledger.update_computer_assignment(session, assignment_id, payload, assigned_by=current_user)
    return {
        "message": "Computer assignment updated successfully",
        "assignment": ledger.computer_assignment_read(assignment),
    }


@router.delete("/computer-assignments/{assignment_id}")
async def delete_computer_assignment(
    assignment_id: uuid.UUID,
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    ledger.delete_computer_assignment(session, assignment_id)
    return {"message": "Computer assignment removed successfully"}


@router.get("/students-groups/{class_id}")
async def students_and_groups(
    class_id: uuid.UUID,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    return directory.students_and_groups(session, class_id)


@router.get("/unassigned-students/{class_id}/{lab_id}")
async def unassigned_students(
    class_id: uuid.UUID,
    lab_id: uuid.UUID,
    schedule_id: Optional[uuid.UUID] = Query(default=None, alias="scheduleId"),
    session: Session = Depends(get_session),
    _: User = Depends(require_staff),
):
    return ledger.unassigned_students(session, class_id, lab_id, schedule_id)


@router.get("/my-seat-info")
async def my_seat_info(session: Session = Depends(get_session), current_user: User = Depends(require_student)):
    return {"seat_info": ledger.student_seat_info(session, current_user)}
