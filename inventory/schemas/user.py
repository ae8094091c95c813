from datetime import datetime

from pydantic import BaseModel, Field

from inventory.models.user import UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.STAFF
    full_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=100, pattern=EMAIL_PATTERN)


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    password: str | None = Field(default=None, min_length=6)  # unchanged when omitted
    role: UserRole | None = None
    full_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=100, pattern=EMAIL_PATTERN)
    active: bool | None = None


class UserOut(BaseModel):
    id: str
    username: str
    role: UserRole
    full_name: str | None
    email: str | None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TokenOut(BaseModel):
    token: str
    type: str = "Bearer"
    id: str
    username: str
    full_name: str | None = None
    email: str | None = None
    role: UserRole
