from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.notification import Notification
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def get_for_recipient(self, recipient_id: str, limit: int = 100) -> List[Notification]:
        """Newest first."""
        try:
            return (
                self.db.query(Notification)
                .filter(Notification.recipient_id == recipient_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing notifications for {recipient_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    def count_unread(self, recipient_id: str) -> int:
        return self.count(recipient_id=recipient_id, read=False)

    def mark_all_read(self, recipient_id: str) -> int:
        try:
            updated = (
                self.db.query(Notification)
                .filter(Notification.recipient_id == recipient_id, Notification.read.is_(False))
                .update({Notification.read: True}, synchronize_session="fetch")
            )
            self.db.flush()
            return int(updated)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking notifications read for {recipient_id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to mark notifications read: {str(e)}")
