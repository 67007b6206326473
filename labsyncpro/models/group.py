import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import CheckConstraint, UniqueConstraint

if TYPE_CHECKING:
    from .classroom import SchoolClass
    from .user import User


class Group(SQLModel, table=True):
    __tablename__ = "groups"
    __table_args__ = (
        UniqueConstraint("class_id", "name", name="uq_group_class_name"),
        CheckConstraint("max_members >= 1", name="ck_group_max_members_positive"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    class_id: uuid.UUID = Field(foreign_key="classes.id", index=True)
    name: str
    max_members: int = 4
    description: Optional[str] = None
    leader_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    school_class: "SchoolClass" = Relationship(back_populates="groups")
    leader: Optional["User"] = Relationship()
    memberships: List["GroupMember"] = Relationship(
        back_populates="group", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    @property
    def ordered_members(self) -> List["GroupMember"]:
        """Leader first, then by first name."""
        return sorted(
            self.memberships,
            key=lambda m: (m.role != "leader", m.user.first_name.lower(), m.user.last_name.lower()),
        )


class GroupMember(SQLModel, table=True):
    __tablename__ = "group_members"
    __table_args__ = (
        CheckConstraint("role IN ('leader', 'member')", name="ck_group_member_role"),
    )

    group_id: uuid.UUID = Field(foreign_key="groups.id", primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True)
    role: str = "member"
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    group: "Group" = Relationship(back_populates="memberships")
    user: "User" = Relationship()
