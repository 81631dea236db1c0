"""
Database models for TutorLink.

Importing this package registers every table on ``Base.metadata``.
"""

from .notification import Notification
from .review import Review
from .session import TutoringSession
from .tutor import TutorProfile, TutorSubject, WeeklyAvailability
from .user import User
from .wishlist import WishlistItem

__all__ = [
    "User",
    "TutorProfile",
    "TutorSubject",
    "WeeklyAvailability",
    "TutoringSession",
    "Notification",
    "Review",
    "WishlistItem",
]
