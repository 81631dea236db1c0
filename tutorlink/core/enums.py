# tutorlink/core/enums.py
"""
Core enums for the TutorLink platform.

Closed enumerations for every value that used to travel as a free-form
string (roles, weekdays, statuses, notification kinds). Persisted columns
store the ``.value`` so rows stay readable in the database.
"""

from enum import Enum
from typing import Optional


class RoleName(str, Enum):
    """Roles supplied by the identity provider."""

    ADMIN = "admin"
    TUTOR = "tutor"
    STUDENT = "student"


class DayOfWeek(str, Enum):
    """Weekdays in canonical lowercase form, ordered Monday first like ``date.weekday()``."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def parse(cls, raw: "str | DayOfWeek") -> "DayOfWeek":
        """Normalize case and whitespace; raises ValueError for unknown names."""
        if isinstance(raw, DayOfWeek):
            return raw
        normalized = (raw or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown day of week: {raw!r}") from None

    @classmethod
    def from_index(cls, index: int) -> "DayOfWeek":
        return list(cls)[index]


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    PENDING = "pending"  # Requested by the student, awaiting the tutor
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Active sessions block new bookings on the same time."""
        return self in ACTIVE_SESSION_STATUSES


ACTIVE_SESSION_STATUSES = frozenset({SessionStatus.PENDING, SessionStatus.CONFIRMED})


class SessionType(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"


class TeachingMode(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"
    BOTH = "both"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ProficiencyLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ProficiencyLevel":
        if not raw:
            return cls.BEGINNER
        for member in cls:
            if member.value.lower() == raw.strip().lower():
                return member
        raise ValueError(f"Unknown proficiency level: {raw!r}")


class NotificationType(str, Enum):
    SESSION_REQUEST = "session-request"
    SESSION_UPDATE = "session-update"
    VERIFICATION = "verification"
    REVIEW = "review"
    RATE_CHANGE = "rate-change"


class RelatedModel(str, Enum):
    """Kind of entity a notification points back to."""

    SESSION = "Session"
    REVIEW = "Review"
    TUTOR = "TutorProfile"
