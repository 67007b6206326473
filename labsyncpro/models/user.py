import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Relationship
from labsyncpro.security import hash_password, verify_password
from .link_models import Enrollment

if TYPE_CHECKING:
    from .classroom import SchoolClass

STAFF_ROLES = ("admin", "instructor")


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_code: Optional[str] = Field(default=None, unique=True)
    email: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    role: str = "student"  # student | instructor | admin
    password_hash: str = ""
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    classes: List["SchoolClass"] = Relationship(back_populates="students", link_model=Enrollment)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def set_password(self, password: str):
        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and verify_password(password, self.password_hash)
