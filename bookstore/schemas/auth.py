from pydantic import BaseModel, ConfigDict, field_validator
from typing import ClassVar
from datetime import datetime
import uuid


def _strip_or_none(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


# Register payload; format rules live in AuthService.register
class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    username: str | None = None

    @field_validator("email", "username", mode="before")
    @classmethod
    def strip_blank(cls, v: object) -> object:
        return _strip_or_none(v)


# Login payload
class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def strip_blank(cls, v: object) -> object:
        return _strip_or_none(v)


# User summary (embedded in tokens, logins and transactions)
class UserSummary(BaseModel):
    id: uuid.UUID
    email: str
    username: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


# Public user fields returned on registration
class UserPublic(UserSummary):
    created_at: datetime


# Profile returned by /auth/me
class UserProfile(UserPublic):
    updated_at: datetime


class LoginResult(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary
