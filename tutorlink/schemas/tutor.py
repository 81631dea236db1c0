from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import (
    MAX_BIO_LENGTH,
    MAX_CITY_LENGTH,
    MAX_SUBJECT_LENGTH,
    MAX_SUBJECTS_PER_TUTOR,
)
from ..core.enums import DayOfWeek, ProficiencyLevel, TeachingMode, VerificationStatus
from ..models.tutor import TutorProfile
from ._strict_base import StrictRequestModel
from .availability import AvailabilityWindowOut

DAY_ORDER = list(DayOfWeek)


class VerificationUpdate(StrictRequestModel):
    status: Literal["verified", "rejected"]
    comment: Optional[str] = Field(None, max_length=1000)


class SubjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    proficiency_level: str


class TutorVerificationResponse(BaseModel):
    id: str
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    hourly_rate: float
    verification_status: VerificationStatus
    verification_comment: Optional[str] = None
    verified_at: Optional[datetime] = None
    subjects: List[SubjectOut] = Field(default_factory=list)

    @classmethod
    def from_profile(cls, tutor: TutorProfile) -> "TutorVerificationResponse":
        return cls(
            id=tutor.id,
            user_id=tutor.user_id,
            name=tutor.user.name if tutor.user is not None else None,
            email=tutor.user.email if tutor.user is not None else None,
            hourly_rate=float(tutor.hourly_rate or 0),
            verification_status=tutor.verification_status,
            verification_comment=tutor.verification_comment,
            verified_at=tutor.verified_at,
            subjects=[SubjectOut.model_validate(s) for s in tutor.subjects],
        )


class VerificationStatsResponse(BaseModel):
    pending: int
    verified: int
    rejected: int
    total: int


# Profile management


class SubjectIn(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_SUBJECT_LENGTH)
    proficiency_level: ProficiencyLevel = ProficiencyLevel.BEGINNER

    @field_validator("name")
    @classmethod
    def collapse_whitespace(cls, v: str) -> str:
        name = " ".join(v.split())
        if not name:
            raise ValueError("Subject name cannot be empty")
        return name

    @field_validator("proficiency_level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if v is None or isinstance(v, str):
            return ProficiencyLevel.parse(v)
        return v


def _subjects_from_names(v: Any) -> Any:
    """Plain subject names are shorthand for ``{"name": ...}``."""
    if isinstance(v, list):
        return [{"name": item} if isinstance(item, str) else item for item in v]
    return v


def _clean_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return v.strip() or None


class TutorProfileCreate(StrictRequestModel):
    """Full tutor profile, as saved from the profile editor."""

    subjects: List[SubjectIn] = Field(..., min_length=1, max_length=MAX_SUBJECTS_PER_TUTOR)
    hourly_rate: Decimal = Field(..., ge=0, le=10000, decimal_places=2)
    city: str = Field(..., min_length=1, max_length=MAX_CITY_LENGTH)
    bio: str = Field(..., min_length=1, max_length=MAX_BIO_LENGTH)
    teaching_mode: TeachingMode = TeachingMode.BOTH

    @field_validator("subjects", mode="before")
    @classmethod
    def expand_subject_names(cls, v: Any) -> Any:
        return _subjects_from_names(v)

    @field_validator("city", "bio")
    @classmethod
    def require_text(cls, v: str) -> str:
        cleaned = _clean_text(v)
        if cleaned is None:
            raise ValueError("Field cannot be blank")
        return cleaned


class TutorProfileUpdate(StrictRequestModel):
    """Partial profile update; omitted fields keep their value."""

    subjects: Optional[List[SubjectIn]] = Field(
        None, min_length=1, max_length=MAX_SUBJECTS_PER_TUTOR
    )
    hourly_rate: Optional[Decimal] = Field(None, ge=0, le=10000, decimal_places=2)
    city: Optional[str] = Field(None, max_length=MAX_CITY_LENGTH)
    bio: Optional[str] = Field(None, max_length=MAX_BIO_LENGTH)
    teaching_mode: Optional[TeachingMode] = None

    @field_validator("subjects", mode="before")
    @classmethod
    def expand_subject_names(cls, v: Any) -> Any:
        return _subjects_from_names(v)

    @field_validator("city", "bio")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return _clean_text(v)


# Directory and profile views


class TutorSummaryResponse(BaseModel):
    """Directory card: enough to pick a tutor, nothing private."""

    id: str
    name: Optional[str] = None
    city: Optional[str] = None
    subjects: List[SubjectOut] = Field(default_factory=list)
    hourly_rate: float
    teaching_mode: TeachingMode
    rating: float
    review_count: int

    @classmethod
    def fields_from_profile(cls, tutor: TutorProfile) -> Dict[str, Any]:
        return {
            "id": tutor.id,
            "name": tutor.user.name if tutor.user is not None else None,
            "city": tutor.city,
            "subjects": [SubjectOut.model_validate(s) for s in tutor.subjects],
            "hourly_rate": float(tutor.hourly_rate or 0),
            "teaching_mode": tutor.teaching_mode,
            "rating": float(tutor.rating or 0),
            "review_count": int(tutor.review_count or 0),
        }

    @classmethod
    def from_profile(cls, tutor: TutorProfile) -> "TutorSummaryResponse":
        return cls(**cls.fields_from_profile(tutor))


class TutorDetailResponse(TutorSummaryResponse):
    bio: Optional[str] = None
    is_verified: bool
    availability: List[AvailabilityWindowOut] = Field(default_factory=list)

    @classmethod
    def fields_from_profile(cls, tutor: TutorProfile) -> Dict[str, Any]:
        windows = sorted(
            (row.to_window() for row in tutor.availability),
            key=lambda w: DAY_ORDER.index(w.day_of_week),
        )
        return {
            **super().fields_from_profile(tutor),
            "bio": tutor.bio,
            "is_verified": tutor.is_verified,
            "availability": [AvailabilityWindowOut.from_window(w) for w in windows],
        }


class TutorProfileResponse(TutorDetailResponse):
    """The tutor's own view, including verification state."""

    user_id: str
    email: Optional[str] = None
    verification_status: VerificationStatus
    verification_comment: Optional[str] = None

    @classmethod
    def fields_from_profile(cls, tutor: TutorProfile) -> Dict[str, Any]:
        return {
            **super().fields_from_profile(tutor),
            "user_id": tutor.user_id,
            "email": tutor.user.email if tutor.user is not None else None,
            "verification_status": tutor.verification_status,
            "verification_comment": tutor.verification_comment,
        }


class TutorSearchResponse(BaseModel):
    tutors: List[TutorSummaryResponse]
    total: int
    page: int
    limit: int
