import uuid
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, model_validator

from labsyncpro.models.assignment import AssignmentType


class SeatAssignmentCreate(BaseModel):
    user_id: uuid.UUID
    seat_id: uuid.UUID
    schedule_id: uuid.UUID


class SeatAssignmentUpdate(BaseModel):
    user_id: Optional[uuid.UUID] = None
    seat_id: Optional[uuid.UUID] = None


class SeatAssignmentRead(BaseModel):
    id: uuid.UUID
    schedule_id: uuid.UUID
    user_id: uuid.UUID
    seat_id: uuid.UUID
    seat_number: int
    seat_name: str
    first_name: str
    last_name: str
    student_code: Optional[str] = None
    student_name: str
    assigned_at: datetime


class ComputerAssignmentCreate(BaseModel):
    schedule_id: uuid.UUID
    assigned_computer: uuid.UUID = Field(validation_alias=AliasChoices("assigned_computer", "computer_id"))
    assignment_type: AssignmentType
    group_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _check_owner(self):
        if self.group_id and self.user_id:
            raise ValueError("Either group_id or user_id must be provided, but not both")
        if self.assignment_type == AssignmentType.GROUP and not self.group_id:
            raise ValueError("group_id is required for group assignments")
        if self.assignment_type == AssignmentType.INDIVIDUAL and not self.user_id:
            raise ValueError("user_id is required for individual assignments")
        return self


class ComputerAssignmentUpdate(BaseModel):
    computer_id: Optional[uuid.UUID] = None
    group_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _check_owner(self):
        if self.group_id and self.user_id:
            raise ValueError("Cannot assign to both group and user simultaneously")
        return self


class ComputerAssignmentRead(BaseModel):
    id: uuid.UUID
    schedule_id: uuid.UUID
    computer_id: uuid.UUID
    computer_name: str
    computer_number: int
    assignment_type: AssignmentType
    group_id: Optional[uuid.UUID] = None
    group_name: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
    student_name: Optional[str] = None
    assigned_at: datetime
