"""
iBuddy Backend — User Schemas
===============================

What:  Pydantic models for user records and the forms that create, edit and
       authenticate them.

Note the absence of any password field on `User`: the hash never leaves the
identity store, and plaintext passwords only exist on `UserCreate` and
`LoginRequest`.
"""

from datetime import date

from pydantic import BaseModel, EmailStr, Field, field_validator

from ibuddy.models.user import Role
from ibuddy.schemas.common import AgreementWindow, normalize_email, require_text


class User(BaseModel):
    """A stored user as returned by the identity store."""

    id: str = Field(description="User#<lowercased email>")
    email: str
    first_name: str
    last_name: str
    faculty: str
    role: Role
    agreement_start_date: date
    agreement_end_date: date

    model_config = {"from_attributes": True}


class UserUpdate(AgreementWindow):
    """
    Every user attribute except `id`, which is derived from the email.

    Used both for full-record replacement and as the base of `UserCreate`.
    """

    email: EmailStr
    first_name: str
    last_name: str
    faculty: str = ""
    role: Role = Role.BUDDY

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v: str) -> str:
        return require_text(v, "First name")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v: str) -> str:
        return require_text(v, "Last name")


class UserCreate(UserUpdate):
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


class DeleteUserResponse(BaseModel):
    can_delete: bool
    reason: str = ""
