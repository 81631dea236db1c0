from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_for_tutor(self, tutor_id: str) -> List[Review]:
        try:
            return (
                self.db.query(Review)
                .options(joinedload(Review.student))
                .filter(Review.tutor_id == tutor_id)
                .order_by(Review.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list reviews: {str(e)}")

    def rating_stats(self, tutor_id: str) -> Tuple[float, int]:
        """(mean rating, review count) for a tutor."""
        try:
            avg, count = (
                self.db.query(func.avg(Review.rating), func.count(Review.id))
                .filter(Review.tutor_id == tutor_id)
                .one()
            )
            return float(avg or 0.0), int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error computing rating for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute rating: {str(e)}")
