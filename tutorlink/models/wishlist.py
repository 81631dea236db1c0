# tutorlink/models/wishlist.py
"""Tutors a student has saved for later."""

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base, utcnow


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    student_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tutor_id = Column(
        String(26), ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), default=utcnow)

    student = relationship("User")
    tutor = relationship("TutorProfile")

    __table_args__ = (UniqueConstraint("student_id", "tutor_id", name="uq_wishlist_student_tutor"),)

    def __repr__(self) -> str:
        return f"<WishlistItem {self.id}: student={self.student_id}, tutor={self.tutor_id}>"
