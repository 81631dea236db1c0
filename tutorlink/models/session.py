# tutorlink/models/session.py
"""
Tutoring session model for TutorLink.

A session is a student's booking of a tutor for a date, start time and
duration. Sessions are never deleted; cancellation is a status.

The partial unique index on (tutor_id, session_date, start_time) over
pending/confirmed rows backs up the per-tutor booking lock: two active
sessions can never share a start time even if the lock is bypassed.
"""

from datetime import date, datetime, time, timedelta
import logging
from typing import Any, Optional, cast

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import ACTIVE_SESSION_STATUSES, SessionStatus, SessionType
from ..database import Base, utcnow

logger = logging.getLogger(__name__)

ACTIVE_STATUS_PREDICATE = "status IN ('pending', 'confirmed')"


class TutoringSession(Base):
    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    tutor_id = Column(String(26), ForeignKey("tutor_profiles.id"), nullable=False, index=True)
    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    session_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value, index=True)
    subject = Column(String(120), nullable=False)
    session_type = Column(String(20), nullable=False, default=SessionType.ONLINE.value)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    reviewed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)

    tutor = relationship("TutorProfile", backref="sessions")
    student = relationship("User", foreign_keys=[student_id], backref="student_sessions")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_sessions_status",
        ),
        CheckConstraint(
            "session_type IN ('online', 'in-person')",
            name="ck_sessions_session_type",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        Index(
            "uq_sessions_tutor_active_start",
            "tutor_id",
            "session_date",
            "start_time",
            unique=True,
            sqlite_where=text(ACTIVE_STATUS_PREDICATE),
            postgresql_where=text(ACTIVE_STATUS_PREDICATE),
        ),
        Index("ix_sessions_tutor_date_status", "tutor_id", "session_date", "status"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = SessionStatus.PENDING.value
        logger.debug(f"Creating session for student {self.student_id} with tutor {self.tutor_id}")

    def __repr__(self) -> str:
        return (
            f"<TutoringSession {self.id}: tutor={self.tutor_id}, student={self.student_id}, "
            f"date={self.session_date}, start={self.start_time}, "
            f"duration={self.duration_minutes}, status={self.status}>"
        )

    @property
    def status_enum(self) -> SessionStatus:
        return SessionStatus(self.status)

    @property
    def is_active(self) -> bool:
        return self.status_enum in ACTIVE_SESSION_STATUSES

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(cast(date, self.session_date), cast(time, self.start_time))

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=int(self.duration_minutes))

    @property
    def end_time(self) -> time:
        return self.ends_at.time()

    def is_upcoming(self, now: datetime) -> bool:
        """Active and starting at or after ``now``."""
        return self.is_active and self.starts_at >= now

    def participant_ids(self) -> tuple[str, Optional[str]]:
        """(student user id, tutor user id); the tutor user id needs the profile loaded."""
        tutor_user_id = self.tutor.user_id if self.tutor is not None else None
        return cast(str, self.student_id), tutor_user_id
