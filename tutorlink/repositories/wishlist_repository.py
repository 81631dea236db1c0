from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.tutor import TutorProfile
from ..models.wishlist import WishlistItem
from .base_repository import BaseRepository


class WishlistRepository(BaseRepository[WishlistItem]):
    def __init__(self, db: Session):
        super().__init__(db, WishlistItem)

    def get_for_student(self, student_id: str) -> List[WishlistItem]:
        """Saved tutors of a student, most recently saved first."""
        try:
            return (
                self.db.query(WishlistItem)
                .options(joinedload(WishlistItem.tutor).joinedload(TutorProfile.user))
                .filter(WishlistItem.student_id == student_id)
                .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing wishlist for student {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to list wishlist: {str(e)}")

    def get_item(self, student_id: str, tutor_id: str) -> Optional[WishlistItem]:
        return self.find_one_by(student_id=student_id, tutor_id=tutor_id)

    def student_ids_for_tutor(self, tutor_id: str) -> List[str]:
        try:
            rows = (
                self.db.query(WishlistItem.student_id)
                .filter(WishlistItem.tutor_id == tutor_id)
                .all()
            )
            return [row[0] for row in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing followers of tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list wishlist followers: {str(e)}")
