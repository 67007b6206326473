import uuid
from datetime import date, time
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer

from .group import StudentBrief


class LabCapacity(BaseModel):
    id: uuid.UUID
    name: str
    total_computers: int
    available_computers: int
    occupied_computers: int
    capacity_percentage: int


class ClassCapacity(BaseModel):
    id: uuid.UUID
    name: str
    total_students: int
    assigned_students: int
    lab_assignment: Optional[str] = None


class CapacityOverview(BaseModel):
    labs: List[LabCapacity] = Field(default_factory=list)
    classes: List[ClassCapacity] = Field(default_factory=list)
    overall_capacity: int = 0
    total_computers: int = 0
    available_computers: int = 0
    occupied_computers: int = 0


class UnassignedStudents(BaseModel):
    unassigned_students: List[StudentBrief] = Field(default_factory=list)
    count: int = 0


class StudentSeatInfo(BaseModel):
    id: uuid.UUID
    schedule_id: uuid.UUID
    seat_number: int
    seat_name: str
    lab_name: str
    lab_location: Optional[str] = None
    schedule_title: str
    scheduled_date: date
    start_time: time
    end_time: time
    class_name: Optional[str] = None
    computer_id: Optional[uuid.UUID] = None
    computer_name: Optional[str] = None
    computer_group_id: Optional[uuid.UUID] = None
    computer_group_name: Optional[str] = None

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")
