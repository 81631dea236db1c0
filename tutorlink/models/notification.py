"""
In-app notification model for TutorLink.

Notifications are immutable apart from the ``read`` flag; delivery beyond
the in-app inbox is out of scope.
"""

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    recipient_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    type = Column(String(30), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    related_id = Column(String(26), nullable=True)
    related_model = Column(String(30), nullable=True)
    # Microsecond precision keeps newest-first ordering stable
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    recipient = relationship("User", foreign_keys=[recipient_id])
    sender = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        CheckConstraint(
            "type IN ('session-request', 'session-update', 'verification', 'review', 'rate-change')",
            name="ck_notifications_type",
        ),
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.id}: {self.type} -> {self.recipient_id} read={self.read}>"
