# tutorlink/services/reporting_service.py
"""
Admin reporting for TutorLink.

Read-only aggregates over sessions, users and tutor ratings.
"""

from collections import Counter
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.constants import DEFAULT_PAGE_SIZE, TOP_CITIES_LIMIT, TOP_SUBJECTS_LIMIT
from ..core.enums import RoleName, SessionStatus
from ..core.exceptions import NotAuthorizedException
from ..models.user import User
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def completion_rate(completed: int, cancelled: int) -> float:
    """Completed share of finished sessions, as a percentage with 2 decimals."""
    finished = completed + cancelled
    if finished == 0:
        return 0.0
    return round(completed / finished * 100, 2)


class ReportingService(BaseService):
    def __init__(self, db: Session, clock: Optional[Clock] = None):
        super().__init__(db, clock)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)

    @BaseService.measure_operation("session_stats")
    def session_stats(self, actor: Actor) -> Dict[str, Any]:
        if not actor.is_admin:
            raise NotAuthorizedException("Admin access required")

        counts = self.session_repository.count_by_status()
        status_counts = {status.value: counts.get(status.value, 0) for status in SessionStatus}
        by_month = Counter(d.strftime("%Y-%m") for d in self.session_repository.session_dates())

        return {
            "status_counts": status_counts,
            "top_subjects": [
                {"name": name, "count": count}
                for name, count in self.session_repository.top_subjects(TOP_SUBJECTS_LIMIT)
            ],
            "sessions_by_month": [
                {"month": month, "count": by_month[month]} for month in sorted(by_month)
            ],
            "completion_rate": completion_rate(
                status_counts[SessionStatus.COMPLETED.value],
                status_counts[SessionStatus.CANCELLED.value],
            ),
        }

    @BaseService.measure_operation("platform_stats")
    def platform_stats(self, actor: Actor) -> Dict[str, Any]:
        if not actor.is_admin:
            raise NotAuthorizedException("Admin access required")

        counts = self.session_repository.count_by_status()
        return {
            "users_by_role": self.user_repository.count_by_role(),
            "total_sessions": sum(counts.values()),
            "total_revenue": float(self.session_repository.completed_revenue()),
            "average_rating": round(self.tutor_repository.average_rating(), 2),
        }

    @BaseService.measure_operation("list_users")
    def list_users(
        self,
        actor: Actor,
        role: Optional[RoleName] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[User], int]:
        """One page of users, newest first, with the total match count."""
        if not actor.is_admin:
            raise NotAuthorizedException("Admin access required")
        return self.user_repository.search(
            role=RoleName(role).value if role else None,
            search=(search or "").strip() or None,
            skip=(page - 1) * limit,
            limit=limit,
        )

    @BaseService.measure_operation("user_stats")
    def user_stats(self, actor: Actor) -> Dict[str, Any]:
        if not actor.is_admin:
            raise NotAuthorizedException("Admin access required")

        counts = self.user_repository.count_by_role()
        by_month = Counter(t.strftime("%Y-%m") for t in self.user_repository.signup_times())
        return {
            "users_by_role": {role.value: counts.get(role.value, 0) for role in RoleName},
            "top_cities": [
                {"name": city, "count": count}
                for city, count in self.user_repository.top_cities(TOP_CITIES_LIMIT)
            ],
            "signups_by_month": [
                {"month": month, "count": by_month[month]} for month in sorted(by_month)
            ],
            "total_users": sum(counts.values()),
        }
