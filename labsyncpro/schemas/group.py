import uuid
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class StudentBrief(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    student_code: Optional[str] = None
    email: str


class StudentRead(StudentBrief):
    group_id: Optional[uuid.UUID] = None
    group_name: Optional[str] = None
    group_role: Optional[Literal["leader", "member"]] = None


class GroupMemberRead(StudentBrief):
    role: Literal["leader", "member"]


class GroupRead(BaseModel):
    id: uuid.UUID
    class_id: uuid.UUID
    name: str
    description: Optional[str] = None
    max_members: int
    leader_id: Optional[uuid.UUID] = None
    leader_name: Optional[str] = None
    member_count: int = 0
    members: List[GroupMemberRead] = Field(default_factory=list)


class StudentsGroupsRead(BaseModel):
    students: List[StudentRead] = Field(default_factory=list)
    groups: List[GroupRead] = Field(default_factory=list)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    max_members: Optional[int] = Field(default=None, ge=1, le=10)
    description: Optional[str] = None
    leader_id: Optional[uuid.UUID] = None
