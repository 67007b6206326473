from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import require_staff
from labsyncpro.models import User
from labsyncpro.schemas.assignment import ComputerAssignmentCreate
from labsyncpro.services import ledger

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_assignment(
    payload: ComputerAssignmentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_staff),
):
    assignment = ledger.create_computer_assignment(session, payload, assigned_by=current_user)
    return {"message": "Assignment created successfully", "assignment": ledger.computer_assignment_read(assignment)}
