import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import date, datetime, time, timezone
from enum import Enum
from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import CheckConstraint, UniqueConstraint

if TYPE_CHECKING:
    from .classroom import SchoolClass
    from .lab import Lab
    from .assignment import SeatAssignment, ComputerAssignment


class ScheduleStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Schedule(SQLModel, table=True):
    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("class_id", "lab_id", "scheduled_date", "start_time", name="uq_schedule_class_lab_slot"),
        CheckConstraint("start_time < end_time", name="ck_schedule_time_order"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: Optional[str] = None
    class_id: uuid.UUID = Field(foreign_key="classes.id", index=True)
    lab_id: uuid.UUID = Field(foreign_key="labs.id", index=True)
    scheduled_date: date = Field(index=True)
    start_time: time
    end_time: time
    status: ScheduleStatus = Field(default=ScheduleStatus.SCHEDULED)
    created_by_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    school_class: "SchoolClass" = Relationship(back_populates="schedules")
    lab: "Lab" = Relationship()
    seat_assignments: List["SeatAssignment"] = Relationship(
        back_populates="schedule", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    computer_assignments: List["ComputerAssignment"] = Relationship(
        back_populates="schedule", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    @property
    def duration_minutes(self) -> int:
        start = datetime.combine(self.scheduled_date, self.start_time)
        end = datetime.combine(self.scheduled_date, self.end_time)
        return int((end - start).total_seconds() // 60)
