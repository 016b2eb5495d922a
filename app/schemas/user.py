"""User Schemas — login, profile and profile-update payloads.

Invariants:
    - UserOut never carries the password hash
    - new_password, when given, is 6-72 chars (bcrypt input limit)
    - Empty strings in the update payload count as not given
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=72)


class LoginResponse(BaseModel):
    id: int
    username: str
    token: str
    exp: int


class UserOut(BaseModel):
    """Sanitized user — public-facing account data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    created_at: datetime
    updated_at: datetime


class UpdateUserInfoRequest(BaseModel):
    old_password: str | None = Field(None, max_length=72)
    new_password: str | None = Field(None, min_length=6, max_length=72)
    username: str | None = Field(None, min_length=1, max_length=64)

    @field_validator("old_password", "new_password", "username", mode="before")
    @classmethod
    def empty_as_unset(cls, v):
        return None if v == "" else v
