from datetime import datetime
from typing import Optional

from uems.extensions import db
from uems.models import Notification


class NotificationRepository:
    @staticmethod
    def create(attrs, commit: bool = True) -> Notification:
        notification = Notification(**attrs)
        db.session.add(notification)
        if commit:
            db.session.commit()
        return notification

    @staticmethod
    def find_for_user(notification_id: int, user_id: int) -> Optional[Notification]:
        return Notification.query.filter_by(id=notification_id, user_id=user_id).first()

    @staticmethod
    def get_for_user(user_id: int, unread_only: bool = False, page: int = 1, limit: int = 20):
        query = Notification.query.filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(
            Notification.created_at.desc(), Notification.id.desc()
        ).paginate(page=page, per_page=limit, error_out=False)

    @staticmethod
    def count_unread(user_id: int) -> int:
        return Notification.query.filter(
            Notification.user_id == user_id, Notification.is_read.is_(False)
        ).count()

    @staticmethod
    def mark_as_read(notification: Notification, read_at: datetime) -> Notification:
        notification.is_read = True
        notification.read_at = read_at
        db.session.commit()
        return notification

    @staticmethod
    def mark_all_as_read(user_id: int, read_at: datetime) -> int:
        updated = (
            Notification.query.filter(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
            .update(
                {Notification.is_read: True, Notification.read_at: read_at},
                synchronize_session=False,
            )
        )
        db.session.commit()
        return updated

    @staticmethod
    def delete(notification: Notification):
        db.session.delete(notification)
        db.session.commit()

    @staticmethod
    def delete_all_for_user(user_id: int) -> int:
        deleted = Notification.query.filter_by(user_id=user_id).delete()
        db.session.commit()
        return deleted
