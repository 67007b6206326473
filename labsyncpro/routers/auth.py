import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from labsyncpro.db import get_session
from labsyncpro.dependencies import get_current_user
from labsyncpro.models import User
from labsyncpro.schemas.auth import LoginForm, TokenResponse, UserRead
from labsyncpro.security import create_access_token

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(form: LoginForm, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == form.email.strip().lower())).first()
    if not user or not user.check_password(form.password):
        log.info("Failed login for %s", form.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")

    token = create_access_token({"sub": str(user.id), "role": user.role})
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return {"user": UserRead.model_validate(current_user)}
