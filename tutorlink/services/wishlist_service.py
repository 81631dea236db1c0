# tutorlink/services/wishlist_service.py
"""Students' saved tutors."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.exceptions import ConflictException, NotAuthorizedException, NotFoundException
from ..models.wishlist import WishlistItem
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def _require_student(actor: Actor) -> None:
    if not actor.is_student:
        raise NotAuthorizedException("Only students have a wishlist")


class WishlistService(BaseService):
    def __init__(self, db: Session, clock: Optional[Clock] = None):
        super().__init__(db, clock)
        self.repository = RepositoryFactory.create_wishlist_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)

    def list_items(self, actor: Actor) -> List[WishlistItem]:
        _require_student(actor)
        return self.repository.get_for_student(actor.user_id)

    @BaseService.measure_operation("add_to_wishlist")
    def add_tutor(self, actor: Actor, tutor_id: str) -> WishlistItem:
        """
        Save a tutor for the calling student.

        Raises:
            NotFoundException: Tutor does not exist
            ConflictException: Tutor is already saved
        """
        _require_student(actor)
        if self.tutor_repository.get_by_id(tutor_id, load_relationships=False) is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        if self.repository.get_item(actor.user_id, tutor_id) is not None:
            raise ConflictException(
                "Tutor already in wishlist",
                code="ALREADY_IN_WISHLIST",
                details={"tutor_id": tutor_id},
            )

        with self.transaction():
            item = self.repository.create(student_id=actor.user_id, tutor_id=tutor_id)

        self.log_operation("add_to_wishlist", student_id=actor.user_id, tutor_id=tutor_id)
        return item

    @BaseService.measure_operation("remove_from_wishlist")
    def remove_tutor(self, actor: Actor, tutor_id: str) -> None:
        _require_student(actor)
        item = self.repository.get_item(actor.user_id, tutor_id)
        if item is None:
            raise NotFoundException("Wishlist item not found", details={"tutor_id": tutor_id})
        with self.transaction():
            self.repository.delete(item.id)
        self.log_operation("remove_from_wishlist", student_id=actor.user_id, tutor_id=tutor_id)
