# tests/helpers.py
"""Shared constants and helpers for the test suite."""

from datetime import date, datetime, timedelta
from typing import Dict

from tutorlink.auth import create_access_token
from tutorlink.core.enums import RoleName
from tutorlink.models import User
from tutorlink.principal import Actor

NOW = datetime(2025, 6, 2, 9, 0)  # a Monday
MONDAY = date(2025, 6, 9)
TUESDAY = date(2025, 6, 10)


def actor_for(user: User) -> Actor:
    return Actor(user_id=user.id, role=RoleName(user.role))


def auth_headers(user_id: str, role: RoleName) -> Dict[str, str]:
    token = create_access_token(user_id, role, expires_delta=timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}

# Well-formed ULID that never belongs to a row
MISSING_ID = "01J" + "0" * 23
