# tutorlink/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_actor, require_admin, require_role
from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_conflict_checker,
    get_earnings_service,
    get_notification_service,
    get_reporting_service,
    get_review_service,
    get_tutor_profile_service,
    get_verification_service,
    get_wishlist_service,
)

__all__ = [
    # Auth
    "get_current_actor",
    "require_role",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_availability_service",
    "get_booking_service",
    "get_conflict_checker",
    "get_earnings_service",
    "get_notification_service",
    "get_reporting_service",
    "get_review_service",
    "get_tutor_profile_service",
    "get_verification_service",
    "get_wishlist_service",
]
