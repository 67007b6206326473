import uuid
from typing import List, Optional
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import JSON, Column, UniqueConstraint


class Lab(SQLModel, table=True):
    __tablename__ = "labs"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    location: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    computers: List["Computer"] = Relationship(
        back_populates="lab", sa_relationship_kwargs={"order_by": "Computer.computer_number"}
    )
    seats: List["Seat"] = Relationship(
        back_populates="lab", sa_relationship_kwargs={"order_by": "Seat.seat_number"}
    )

    @property
    def total_computers(self) -> int:
        return len(self.computers)

    @property
    def total_seats(self) -> int:
        return len(self.seats)


class Computer(SQLModel, table=True):
    __tablename__ = "computers"
    __table_args__ = (
        UniqueConstraint("lab_id", "computer_number", name="uq_computer_lab_number"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    lab_id: uuid.UUID = Field(foreign_key="labs.id", index=True)
    computer_name: str
    computer_number: int
    is_functional: bool = True
    specifications: dict = Field(default_factory=dict, sa_column=Column(JSON))

    lab: "Lab" = Relationship(back_populates="computers")


class Seat(SQLModel, table=True):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("lab_id", "seat_number", name="uq_seat_lab_number"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    lab_id: uuid.UUID = Field(foreign_key="labs.id", index=True)
    seat_number: int
    is_available: bool = True  # False while under maintenance

    lab: "Lab" = Relationship(back_populates="seats")
