# tutorlink/routes/v1/__init__.py
"""Versioned API routers, mounted under /api/v1 in main.py."""

from . import admin, notifications, reviews, sessions, tutors, wishlist

__all__ = ["admin", "notifications", "reviews", "sessions", "tutors", "wishlist"]
