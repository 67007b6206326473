import uuid
from typing import Optional
from pydantic import BaseModel


class ClassRead(BaseModel):
    id: uuid.UUID
    name: str
    grade: int
    stream: str
    section: Optional[str] = None
    description: Optional[str] = None
    capacity: int
    lab_id: Optional[uuid.UUID] = None
    group_count: int = 0
    student_count: int = 0
    schedule_count: int = 0
