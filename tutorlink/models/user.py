# tutorlink/models/user.py
"""
User model for TutorLink.

Users are provisioned by the identity provider; only profile data and the
platform role live here. Tutors additionally own a TutorProfile.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import RoleName
from ..database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value, index=True)
    city = Column(String(120), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    tutor_profile = relationship("TutorProfile", back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint("role IN ('student', 'tutor', 'admin')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} ({self.role})>"
