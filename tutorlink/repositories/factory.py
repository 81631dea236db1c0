# tutorlink/repositories/factory.py
"""
Repository Factory for TutorLink

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .conflict_checker_repository import ConflictCheckerRepository
    from .notification_repository import NotificationRepository
    from .review_repository import ReviewRepository
    from .session_repository import SessionRepository
    from .tutor_repository import TutorRepository
    from .user_repository import UserRepository
    from .wishlist_repository import WishlistRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_tutor_repository(db: Session) -> "TutorRepository":
        """Create repository for tutor profiles and availability."""
        from .tutor_repository import TutorRepository

        return TutorRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> "SessionRepository":
        from .session_repository import SessionRepository

        return SessionRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Create repository for conflict checking queries."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)

    @staticmethod
    def create_review_repository(db: Session) -> "ReviewRepository":
        from .review_repository import ReviewRepository

        return ReviewRepository(db)

    @staticmethod
    def create_wishlist_repository(db: Session) -> "WishlistRepository":
        from .wishlist_repository import WishlistRepository

        return WishlistRepository(db)
