from __future__ import annotations

import logging
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

log = logging.getLogger(__name__)

M = TypeVar("M")


class ServiceError(Exception):
    """Raised by services; the app renders it as ``{"error": message}``."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ServiceError):
    status_code = 400


class PermissionDenied(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


def get_or_404(session: Session, model: type[M], ident, message: str) -> M:
    row = session.get(model, ident)
    if row is None:
        raise NotFoundError(message)
    return row


def commit_or_conflict(session: Session, message: str) -> None:
    """Commit, turning a unique-constraint violation into a 409."""
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        log.warning("Integrity error on commit: %s", exc.orig)
        raise ConflictError(message) from exc
