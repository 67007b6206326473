import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import require_staff
from labsyncpro.models import User
from labsyncpro.services import catalog

router = APIRouter()


@router.get("")
async def list_labs(session: Session = Depends(get_session), _: User = Depends(require_staff)):
    return {"labs": catalog.list_labs(session)}


@router.get("/{lab_id}")
async def get_lab(lab_id: uuid.UUID, session: Session = Depends(get_session), _: User = Depends(require_staff)):
    return {"lab": catalog.get_lab_detail(session, lab_id)}
