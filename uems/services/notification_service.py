from flask import current_app

from uems.exceptions import NotificationNotFoundError
from uems.models.enums import NotificationType
from uems.repositories import NotificationRepository
from uems.utils.dates import utcnow


class NotificationService:
    @staticmethod
    def notify(
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        event_id=None,
        action_url=None,
        commit: bool = True,
    ):
        notification = NotificationRepository.create(
            {
                "user_id": user_id,
                "type": type,
                "title": title[:100],
                "message": message[:500],
                "related_event_id": event_id,
                "action_url": action_url,
            },
            commit=commit,
        )
        current_app.logger.info(f"Queued {type.value} notification for user {user_id}")
        return notification

    @staticmethod
    def get_notifications(user, unread_only=False, page=1, limit=20):
        pagination = NotificationRepository.get_for_user(
            user.id, unread_only=unread_only, page=page, limit=limit
        )
        return {
            "notifications": [n.to_dict() for n in pagination.items],
            "current_page": page,
            "total_pages": pagination.pages,
            "total_notifications": pagination.total,
            "unread_count": NotificationRepository.count_unread(user.id),
        }

    @staticmethod
    def mark_as_read(notification_id: int, user):
        notification = NotificationRepository.find_for_user(notification_id, user.id)
        if not notification:
            raise NotificationNotFoundError()
        return NotificationRepository.mark_as_read(notification, utcnow())

    @staticmethod
    def mark_all_as_read(user) -> int:
        return NotificationRepository.mark_all_as_read(user.id, utcnow())

    @staticmethod
    def delete_notification(notification_id: int, user):
        notification = NotificationRepository.find_for_user(notification_id, user.id)
        if not notification:
            raise NotificationNotFoundError()
        NotificationRepository.delete(notification)

    @staticmethod
    def clear_all(user) -> int:
        return NotificationRepository.delete_all_for_user(user.id)

    @staticmethod
    def unread_count(user) -> int:
        return NotificationRepository.count_unread(user.id)
