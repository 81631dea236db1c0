"""Authenticated caller as seen by the service layer."""

from __future__ import annotations

from dataclasses import dataclass

from .core.enums import RoleName


@dataclass(frozen=True)
class Actor:
    """Verified identity from the bearer token: who is acting and in which role."""

    user_id: str
    role: RoleName

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN

    @property
    def is_tutor(self) -> bool:
        return self.role == RoleName.TUTOR

    @property
    def is_student(self) -> bool:
        return self.role == RoleName.STUDENT
