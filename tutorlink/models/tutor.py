# tutorlink/models/tutor.py
"""
Tutor profile models for TutorLink.

A TutorProfile belongs to a user with the tutor role and owns the subjects
it teaches and its weekly availability, one window per weekday.
"""

from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import DayOfWeek, ProficiencyLevel, TeachingMode, VerificationStatus
from ..database import Base, utcnow
from ..domain.availability import AvailabilityWindow, resolve_window


class TutorProfile(Base):
    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, unique=True)

    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    city = Column(String(120), nullable=True)
    bio = Column(Text, nullable=True)
    teaching_mode = Column(String(20), nullable=False, default=TeachingMode.BOTH.value)

    verification_status = Column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True
    )
    verification_comment = Column(Text, nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    user = relationship("User", back_populates="tutor_profile")
    subjects = relationship(
        "TutorSubject", back_populates="tutor", cascade="all, delete-orphan", lazy="selectin"
    )
    availability = relationship(
        "WeeklyAvailability",
        back_populates="tutor",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="check_hourly_rate_non_negative"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_rating_range"),
        CheckConstraint(
            "verification_status IN ('pending', 'verified', 'rejected')",
            name="ck_tutor_profiles_verification_status",
        ),
        CheckConstraint(
            "teaching_mode IN ('online', 'in-person', 'both')",
            name="ck_tutor_profiles_teaching_mode",
        ),
    )

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    def window_for(self, day: DayOfWeek) -> Optional[AvailabilityWindow]:
        """Return the availability window for a weekday, if any."""
        return resolve_window((row.to_window() for row in self.availability), day)

    def __repr__(self) -> str:
        return f"<TutorProfile {self.id}: user={self.user_id}, status={self.verification_status}>"


class TutorSubject(Base):
    __tablename__ = "tutor_subjects"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    tutor_id = Column(
        String(26), ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(120), nullable=False)
    proficiency_level = Column(
        String(20), nullable=False, default=ProficiencyLevel.BEGINNER.value
    )

    tutor = relationship("TutorProfile", back_populates="subjects")


class WeeklyAvailability(Base):
    """Recurring open hours of a tutor for one weekday."""

    __tablename__ = "availability_windows"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    tutor_id = Column(
        String(26), ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week = Column(String(10), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    tutor = relationship("TutorProfile", back_populates="availability")

    __table_args__ = (
        UniqueConstraint("tutor_id", "day_of_week", name="uq_availability_tutor_day"),
        CheckConstraint("start_time < end_time", name="check_window_time_order"),
    )

    def to_window(self) -> AvailabilityWindow:
        return AvailabilityWindow(
            day_of_week=DayOfWeek(self.day_of_week),
            start_time=self.start_time,
            end_time=self.end_time,
        )
