import uuid
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import CheckConstraint, UniqueConstraint

if TYPE_CHECKING:
    from .schedule import Schedule
    from .lab import Computer, Seat
    from .group import Group
    from .user import User


class AssignmentType(str, Enum):
    GROUP = "group"
    INDIVIDUAL = "individual"


class SeatAssignment(SQLModel, table=True):
    __tablename__ = "seat_assignments"
    __table_args__ = (
        UniqueConstraint("schedule_id", "seat_id", name="uq_seat_assignment_seat"),
        UniqueConstraint("schedule_id", "user_id", name="uq_seat_assignment_student"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    schedule_id: uuid.UUID = Field(foreign_key="schedules.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    seat_id: uuid.UUID = Field(foreign_key="seats.id", index=True)
    assigned_by_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")
    assigned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    schedule: "Schedule" = Relationship(back_populates="seat_assignments")
    seat: "Seat" = Relationship()
    student: "User" = Relationship(sa_relationship_kwargs={"foreign_keys": "[SeatAssignment.user_id]"})


class ComputerAssignment(SQLModel, table=True):
    __tablename__ = "computer_assignments"
    __table_args__ = (
        UniqueConstraint("schedule_id", "computer_id", name="uq_computer_assignment_computer"),
        UniqueConstraint("schedule_id", "group_id", name="uq_computer_assignment_group"),
        UniqueConstraint("schedule_id", "user_id", name="uq_computer_assignment_student"),
        CheckConstraint(
            "(group_id IS NULL) <> (user_id IS NULL)", name="ck_computer_assignment_single_owner"
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    schedule_id: uuid.UUID = Field(foreign_key="schedules.id", index=True)
    computer_id: uuid.UUID = Field(foreign_key="computers.id", index=True)
    group_id: Optional[uuid.UUID] = Field(default=None, foreign_key="groups.id", index=True)
    user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True)
    assignment_type: AssignmentType
    assigned_by_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")
    assigned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    schedule: "Schedule" = Relationship(back_populates="computer_assignments")
    computer: "Computer" = Relationship()
    group: Optional["Group"] = Relationship()
    student: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[ComputerAssignment.user_id]"})
