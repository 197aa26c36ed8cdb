"""
iBuddy Backend — Mentee & Note Schemas
========================================

What:  Pydantic models for mentee and note records and their forms.

Records vs forms:
    Mentee / Note          what the store returns (read from ORM rows)
    MenteeCreate           what the store accepts when creating a mentee
    MenteeForm             what a handler accepts; names the buddy by email
    NoteForm / StatusForm  single-field request bodies
"""

from datetime import date, datetime
from typing import List, Literal, Optional

import pycountry
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from ibuddy.models.mentee import MenteeStatus
from ibuddy.schemas.common import AgreementWindow, normalize_email, require_text

Gender = Literal["male", "female"]
Degree = Literal["bachelor", "master", "others"]


class Mentee(BaseModel):
    id: str
    buddy_id: str
    first_name: str
    last_name: str
    email: str
    country_code: str
    home_university: str
    host_faculty: str
    gender: Gender
    degree: Degree
    agreement_start_date: date
    agreement_end_date: date
    status: MenteeStatus

    model_config = {"from_attributes": True}


class MenteeFields(AgreementWindow):
    """Attributes a person fills in about a mentee, shared by the forms below."""

    first_name: str
    last_name: str
    email: EmailStr
    country_code: str = Field(min_length=2, max_length=2)
    home_university: str
    host_faculty: str
    gender: Gender
    degree: Degree

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        # ISO 3166-1 alpha-2
        if not v.isalpha() or pycountry.countries.get(alpha_2=v.upper()) is None:
            raise ValueError("Invalid country")
        return v.upper()

    @field_validator("first_name", "last_name", "home_university", "host_faculty")
    @classmethod
    def validate_required(cls, v: str, info: ValidationInfo) -> str:
        return require_text(v, info.field_name.replace("_", " ").capitalize())


class MenteeCreate(MenteeFields):
    """
    Input of MenteeService.create_mentee.

    There is no `status` field: unknown keys are ignored, so a
    status passed in never reaches the store.
    """

    buddy_id: str


class MenteeForm(MenteeFields):
    buddy_email: EmailStr

    @field_validator("buddy_email", mode="before")
    @classmethod
    def validate_buddy_email(cls, v):
        return normalize_email(v)


class StatusForm(BaseModel):
    status: MenteeStatus


class Note(BaseModel):
    id: str
    content: str
    author_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NoteForm(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return require_text(v, "Note")


class MenteeDetail(BaseModel):
    mentee: Mentee
    notes: List[Note]
