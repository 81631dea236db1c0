from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def search(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """Users filtered by role and a name/email substring, newest first."""
        try:
            query = self.db.query(User)
            if role:
                query = query.filter(User.role == role)
            if search:
                pattern = search.lower()
                query = query.filter(
                    or_(
                        func.lower(User.name).contains(pattern, autoescape=True),
                        func.lower(User.email).contains(pattern, autoescape=True),
                    )
                )
            total = query.count()
            users = (
                query.order_by(User.created_at.desc(), User.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
            return users, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching users: {str(e)}")
            raise RepositoryException(f"Failed to search users: {str(e)}")

    def count_by_role(self) -> Dict[str, int]:
        try:
            rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
            return {role: count for role, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting users by role: {str(e)}")
            raise RepositoryException(f"Failed to count users: {str(e)}")

    def top_cities(self, limit: int) -> List[Tuple[str, int]]:
        try:
            count = func.count(User.id)
            rows = (
                self.db.query(User.city, count)
                .filter(User.city.isnot(None), User.city != "")
                .group_by(User.city)
                .order_by(count.desc(), User.city.asc())
                .limit(limit)
                .all()
            )
            return [(city, n) for city, n in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting users by city: {str(e)}")
            raise RepositoryException(f"Failed to count cities: {str(e)}")

    def signup_times(self) -> List[datetime]:
        try:
            return [
                row[0]
                for row in self.db.query(User.created_at).filter(User.created_at.isnot(None)).all()
            ]
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading signup times: {str(e)}")
            raise RepositoryException(f"Failed to load signup times: {str(e)}")
