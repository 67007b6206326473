from __future__ import annotations

import logging
from typing import Optional

from labsyncpro.models.schedule import ScheduleStatus
from labsyncpro.schemas.schedule import ScheduleRead
from .api import Id, LabSyncClient
from .errors import ApiError, LookupFailed, NetworkError, ScheduleCreationFailed

log = logging.getLogger(__name__)


class ScheduleResolver:
    """Finds the schedule that scopes assignments for a (class, lab) pair."""

    def __init__(self, api: LabSyncClient):
        self.api = api

    async def lookup(self, class_id: Id, lab_id: Id) -> Optional[ScheduleRead]:
        """Read-only: the first schedule for the pair, or None. Never creates one."""
        try:
            schedules = await self.api.find_schedules(class_id=class_id, lab_id=lab_id)
        except ApiError as exc:
            raise LookupFailed(exc.message) from exc
        return next((s for s in schedules if s.status != ScheduleStatus.CANCELLED), None)

    async def resolve_or_create(self, class_id: Id, lab_id: Id) -> ScheduleRead:
        try:
            resolved = await self.api.resolve_or_create_schedule(class_id, lab_id)
        except NetworkError as exc:
            raise LookupFailed(exc.message) from exc
        except ApiError as exc:
            raise ScheduleCreationFailed(exc.message) from exc
        if resolved.created:
            log.info("Created schedule %s for class %s in lab %s", resolved.schedule.id, class_id, lab_id)
        return resolved.schedule
