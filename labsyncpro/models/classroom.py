import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Relationship
from .link_models import Enrollment
from .user import User

if TYPE_CHECKING:
    from .lab import Lab
    from .group import Group
    from .schedule import Schedule


class SchoolClass(SQLModel, table=True):
    __tablename__ = "classes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    grade: int
    stream: str
    section: Optional[str] = None
    description: Optional[str] = None
    capacity: int = 40
    lab_id: Optional[uuid.UUID] = Field(default=None, foreign_key="labs.id", index=True)
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    lab: Optional["Lab"] = Relationship()
    students: List[User] = Relationship(back_populates="classes", link_model=Enrollment)
    groups: List["Group"] = Relationship(back_populates="school_class")
    schedules: List["Schedule"] = Relationship(back_populates="school_class")
