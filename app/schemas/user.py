from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.config import PASSWORD_MIN_LENGTH, PASSWORD_MAX_BYTES


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        """Ensure password is long enough and fits bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so API returns a 422 with a clear message.
        """
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"password too short: must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password too long: must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
        return v


class LoginRequest(BaseModel):
    # "username" is the email address
    username: str
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: EmailStr
    created_at: Optional[datetime] = None


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
