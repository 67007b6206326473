import uuid
from typing import Optional
from pydantic import BaseModel, ConfigDict


class LoginForm(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: str
    student_code: Optional[str] = None


class TokenResponse(BaseModel):
    token: str
    user: UserRead
