# tutorlink/schemas/session.py
"""
Session schemas for TutorLink.

The subject may arrive either as a plain name or as an object with a name
and proficiency level; both normalize to the canonical subject name.
"""

from datetime import date, datetime, time
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import (
    MAX_NOTES_LENGTH,
    MAX_SESSION_DURATION,
    MAX_SUBJECT_LENGTH,
    MIN_SESSION_DURATION,
)
from ..core.enums import ProficiencyLevel, SessionStatus, SessionType
from ..domain.availability import format_hhmm, parse_hhmm
from ..models.session import TutoringSession
from ._strict_base import StrictRequestModel


class SubjectRef(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_SUBJECT_LENGTH)
    proficiencyLevel: Optional[ProficiencyLevel] = None

    @field_validator("proficiencyLevel", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            return ProficiencyLevel.parse(v)
        return v


def canonical_subject(value: Union[str, SubjectRef, dict]) -> str:
    """Canonical subject name from either accepted shape."""
    if isinstance(value, dict):
        value = SubjectRef.model_validate(value)
    name = value.name if isinstance(value, SubjectRef) else value
    name = " ".join(str(name).split())
    if not name:
        raise ValueError("Subject is required")
    if len(name) > MAX_SUBJECT_LENGTH:
        raise ValueError(f"Subject cannot exceed {MAX_SUBJECT_LENGTH} characters")
    return name


class SessionCreate(StrictRequestModel):
    """Booking request from a student."""

    tutor_id: str = Field(..., description="Tutor profile to book")
    session_date: date = Field(..., description="Date of the session")
    start_time: time = Field(..., description="Start time, HH:MM")
    duration_minutes: int = Field(
        ..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION, description="Length in minutes"
    )
    subject: str = Field(..., description="Subject name or {name, proficiencyLevel}")
    session_type: SessionType = SessionType.ONLINE
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    location: Optional[str] = Field(None, max_length=500)

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_hhmm(v)
        return v

    @field_validator("subject", mode="before")
    @classmethod
    def normalize_subject(cls, v: Any) -> str:
        if isinstance(v, (str, dict, SubjectRef)):
            return canonical_subject(v)
        raise ValueError("Subject must be a name or an object with a name")

    @field_validator("notes", "location")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class SessionStatusUpdate(StrictRequestModel):
    status: SessionStatus


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tutor_id: str
    student_id: str
    tutor_name: Optional[str] = None
    student_name: Optional[str] = None
    session_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    status: SessionStatus
    subject: str
    session_type: SessionType
    price: float
    notes: Optional[str] = None
    location: Optional[str] = None
    reviewed: bool = False
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: TutoringSession) -> "SessionResponse":
        tutor_user = session.tutor.user if session.tutor is not None else None
        return cls(
            id=session.id,
            tutor_id=session.tutor_id,
            student_id=session.student_id,
            tutor_name=tutor_user.name if tutor_user is not None else None,
            student_name=session.student.name if session.student is not None else None,
            session_date=session.session_date,
            start_time=format_hhmm(session.start_time),
            end_time=format_hhmm(session.end_time),
            duration_minutes=session.duration_minutes,
            status=session.status,
            subject=session.subject,
            session_type=session.session_type,
            price=float(session.price or 0),
            notes=session.notes,
            location=session.location,
            reviewed=bool(session.reviewed),
            created_at=session.created_at,
            confirmed_at=session.confirmed_at,
            completed_at=session.completed_at,
            cancelled_at=session.cancelled_at,
        )


class BookedTimeResponse(BaseModel):
    """Public view of a booked session: when, never who."""

    session_date: date
    start_time: str
    end_time: str
    duration_minutes: int


class BookedTimesResponse(BaseModel):
    tutor_id: str
    sessions: List[BookedTimeResponse]
