# tutorlink/services/notification_service.py
"""
In-app notification service for TutorLink.

Creation is best-effort: callers emit notifications after their own
state change has committed, and a failure here is logged and swallowed so
it can never undo that change. Inbox operations (list, mark read, delete)
are regular transactional operations restricted to the recipient.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.enums import NotificationType, RelatedModel
from ..core.exceptions import NotAuthorizedException, NotFoundException
from ..models.notification import Notification
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor
from ..repositories import RepositoryFactory
from ..repositories.notification_repository import NotificationRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        repository: Optional[NotificationRepository] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_notification_repository(db)

    def notify(
        self,
        recipient_id: str,
        notification_type: NotificationType,
        message: str,
        *,
        sender_id: Optional[str] = None,
        related_id: Optional[str] = None,
        related_model: Optional[RelatedModel] = None,
    ) -> Optional[Notification]:
        """
        Create a notification without propagating failures.

        Returns the notification, or None if it could not be stored.
        """
        try:
            with self.transaction():
                notification = self.repository.create(
                    recipient_id=recipient_id,
                    sender_id=sender_id,
                    type=notification_type.value,
                    message=message,
                    related_id=related_id,
                    related_model=related_model.value if related_model else None,
                )
        except Exception as e:
            # TODO: persist failed notifications to an outbox table and retry them
            logger.error(
                f"Failed to create {notification_type.value} notification for {recipient_id}: {str(e)}",
                extra={"recipient_id": recipient_id, "related_id": related_id},
            )
            prometheus_metrics.record_notification(notification_type.value, "failed")
            return None

        prometheus_metrics.record_notification(notification_type.value, "created")
        return notification

    @BaseService.measure_operation("list_notifications")
    def list_for_user(self, actor: Actor, limit: int = 100) -> Tuple[List[Notification], int]:
        """Newest first, with the recipient's total unread count."""
        items = self.repository.get_for_recipient(actor.user_id, limit=limit)
        unread = self.repository.count_unread(actor.user_id)
        return items, unread

    def _get_owned(self, actor: Actor, notification_id: str) -> Notification:
        notification = self.repository.get_by_id(notification_id)
        if notification is None:
            raise NotFoundException("Notification not found")
        if notification.recipient_id != actor.user_id:
            raise NotAuthorizedException("Not authorized to access this notification")
        return notification

    @BaseService.measure_operation("mark_notification_read")
    def mark_read(self, actor: Actor, notification_id: str) -> Notification:
        with self.transaction():
            notification = self._get_owned(actor, notification_id)
            notification.read = True
            self.db.flush()
        return notification

    @BaseService.measure_operation("mark_all_notifications_read")
    def mark_all_read(self, actor: Actor) -> int:
        with self.transaction():
            updated = self.repository.mark_all_read(actor.user_id)
        self.log_operation("mark_all_read", user_id=actor.user_id, updated=updated)
        return updated

    @BaseService.measure_operation("delete_notification")
    def delete(self, actor: Actor, notification_id: str) -> None:
        with self.transaction():
            notification = self._get_owned(actor, notification_id)
            self.db.delete(notification)
