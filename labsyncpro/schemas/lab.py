import uuid
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ComputerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    lab_id: uuid.UUID
    computer_name: str
    computer_number: int
    is_functional: bool
    specifications: dict = Field(default_factory=dict)


class SeatRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    lab_id: uuid.UUID
    seat_number: int
    is_available: bool
    seat_name: Optional[str] = None


class LabRead(BaseModel):
    id: uuid.UUID
    name: str
    location: Optional[str] = None
    total_computers: int = 0
    total_seats: int = 0
    functional_computers: int = 0
    available_seats: int = 0


class LabDetail(LabRead):
    computers: List[ComputerRead] = Field(default_factory=list)
    seats: List[SeatRead] = Field(default_factory=list)


class ComputerStatusRead(ComputerRead):
    """A computer joined with the assignment holding it, if any."""
    assignment_id: Optional[uuid.UUID] = None
    schedule_id: Optional[uuid.UUID] = None
    group_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    group_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    student_code: Optional[str] = None


class SeatStatusRead(SeatRead):
    assignment_id: Optional[uuid.UUID] = None
    schedule_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    student_code: Optional[str] = None
    status: str = "available"
