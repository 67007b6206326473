import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from labsyncpro.db import get_session
from labsyncpro.dependencies import get_current_user
from labsyncpro.models import User
from labsyncpro.schemas.group import GroupUpdate
from labsyncpro.services import directory

router = APIRouter()


@router.put("/{group_id}")
async def update_group(
    group_id: uuid.UUID,
    payload: GroupUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    # Staff edit any group; students only the ones they lead.
    group = directory.update_group(session, group_id, payload, current_user)
    return {"message": "Group updated successfully", "group": directory.group_read(group)}
