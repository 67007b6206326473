import uuid
from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from labsyncpro.models.schedule import ScheduleStatus


class ScheduleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    class_id: uuid.UUID
    lab_id: uuid.UUID
    scheduled_date: date
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def _check_times(self):
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class ScheduleResolve(BaseModel):
    class_id: uuid.UUID
    lab_id: uuid.UUID


class ScheduleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    class_id: uuid.UUID
    lab_id: uuid.UUID
    scheduled_date: date
    start_time: time
    end_time: time
    duration_minutes: int = 0
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    created_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class ScheduleResolved(BaseModel):
    schedule: ScheduleRead
    created: bool


class SuggestedSlot(BaseModel):
    start_time: str
    end_time: str


class ScheduleConflict(BaseModel):
    error: str
    conflicting_schedules: List[ScheduleRead]
    suggested_times: Optional[List[SuggestedSlot]] = None
    message: str
