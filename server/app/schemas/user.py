from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import UserRole
from app.schemas.auth import Token


class UserOut(BaseModel):
    id: int
    display_name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RegisterResponse(Token):
    """A new account together with a token, so the client is signed in at once."""

    user: UserOut


class RegisterRequest(BaseModel):
    display_name: str = Field("User", min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str
    role: UserRole = UserRole.STUDENT

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Display name must not be blank"
            raise ValueError(msg)
        return v

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        if "password" in info.data and v != info.data["password"]:
            msg = "Passwords do not match"
            raise ValueError(msg)
        return v
