import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import get_current_user
from labsyncpro.models import User
from labsyncpro.services import catalog, ledger

router = APIRouter()


@router.get("")
async def list_classes(
    lab_id: Optional[uuid.UUID] = Query(default=None, alias="labId"),
    grade: Optional[int] = None,
    stream: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    return {"classes": catalog.list_classes(session, lab_id=lab_id, grade=grade, stream=stream)}


@router.get("/{class_id}/assignments")
async def class_assignments(
    class_id: uuid.UUID,
    lab_id: Optional[uuid.UUID] = Query(default=None, alias="labId"),
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    """Computer assignments across the class's schedules, optionally in one lab."""
    rows = ledger.class_computer_assignments(session, class_id, lab_id)
    return {"assignments": [ledger.computer_assignment_read(a) for a in rows]}
