# tutorlink/services/earnings_service.py
"""
Earnings Service for TutorLink

Loads a tutor's sessions and aggregates earnings relative to the
injected clock.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.exceptions import NotAuthorizedException, NotFoundException
from ..domain.earnings import EarningsSummary, aggregate_earnings
from ..models.tutor import TutorProfile
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class EarningsService(BaseService):
    def __init__(self, db: Session, clock: Optional[Clock] = None):
        super().__init__(db, clock)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)

    def _resolve_tutor(self, actor: Actor, tutor_id: Optional[str]) -> TutorProfile:
        if tutor_id is None:
            if not actor.is_tutor:
                raise NotAuthorizedException("Only tutors have earnings")
            tutor = self.tutor_repository.get_by_user_id(actor.user_id)
            if tutor is None:
                raise NotFoundException("Tutor profile not found")
            return tutor

        tutor = self.tutor_repository.get_by_id(tutor_id)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        if not actor.is_admin and not (actor.is_tutor and tutor.user_id == actor.user_id):
            raise NotAuthorizedException("Not authorized to view these earnings")
        return tutor

    @BaseService.measure_operation("get_earnings")
    def get_earnings(self, actor: Actor, tutor_id: Optional[str] = None) -> EarningsSummary:
        """
        Earnings for the actor's own profile, or for ``tutor_id`` (owner or admin).

        Raises:
            NotAuthorizedException: Actor may not see this tutor's earnings
            NotFoundException: Tutor profile does not exist
        """
        tutor = self._resolve_tutor(actor, tutor_id)
        sessions = self.session_repository.get_for_tutor(tutor.id)
        return aggregate_earnings(sessions, self.clock.now())
