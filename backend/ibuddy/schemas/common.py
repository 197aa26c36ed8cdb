"""
iBuddy Backend — Shared Schema Pieces
=======================================

What:  Field-level validation helpers reused by the user and mentee forms,
       plus the error and health response models.
Why:   The same rules (required text, email case, agreement window) apply
       to every form that creates or edits a person.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

def require_text(value: str, label: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} is required")
    return stripped


def normalize_email(value):
    """Trim and lowercase an email address before EmailStr validates it."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class AgreementWindow(BaseModel):
    """
    Contractor agreement dates as submitted by a form.

    The start date may lie in the past or the future; the end date must be
    in the future and not before the start date.
    """

    agreement_start_date: date
    agreement_end_date: date

    @model_validator(mode="after")
    def check_agreement_window(self):
        if self.agreement_end_date <= date.today() or self.agreement_end_date < self.agreement_start_date:
            raise ValueError("End date must be in the future and after the start date")
        return self


class ErrorResponse(BaseModel):
    """Standard error body returned by every exception handler."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
