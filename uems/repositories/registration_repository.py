from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from uems.extensions import db
from uems.models import Registration, User
from uems.models.enums import RegistrationSource, RegistrationStatus
from uems.repositories.event_repository import EventRepository


class RegistrationRepository:
    @staticmethod
    def find_by_id(registration_id: int) -> Optional[Registration]:
        return Registration.query.filter_by(id=registration_id).first()

    @staticmethod
    def find_by_event_and_user(event_id: int, user_id: int) -> Optional[Registration]:
        return Registration.query.filter_by(event_id=event_id, user_id=user_id).first()

    @staticmethod
    def register_with_seat(
        event_id: int, user_id: int, source: RegistrationSource
    ) -> Optional[Registration]:
        """Claims a seat and inserts the registration in one transaction.

        Returns None when no seat could be claimed. Raises IntegrityError when
        the user already holds a registration; the seat is released by the
        rollback in that case.
        """
        if not EventRepository.increment_attendee_count(event_id, commit=False):
            db.session.rollback()
            return None

        registration = Registration(
            event_id=event_id,
            user_id=user_id,
            status=RegistrationStatus.REGISTERED,
            source=source,
        )
        db.session.add(registration)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise
        return registration

    @staticmethod
    def delete_and_release_seat(registration: Registration):
        try:
            event_id = registration.event_id
            db.session.delete(registration)
            EventRepository.decrement_attendee_count(event_id, commit=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    def update_status(
        registration: Registration, new_status: RegistrationStatus, commit: bool = True
    ) -> Registration:
        registration.status = new_status
        db.session.add(registration)
        if commit:
            db.session.commit()
        return registration

    @staticmethod
    def find_with_users(event_id: int) -> List[Registration]:
        return (
            Registration.query.join(User, Registration.user_id == User.id)
            .filter(Registration.event_id == event_id)
            .order_by(User.last_name.asc(), User.first_name.asc())
            .all()
        )

    @staticmethod
    def count_created_since(since: datetime) -> int:
        return Registration.query.filter(Registration.registered_at >= since).count()

    @staticmethod
    def daily_counts_since(since: datetime) -> List[dict]:
        day = db.func.date(Registration.registered_at)
        rows = (
            db.session.query(day, db.func.count(Registration.id))
            .filter(Registration.registered_at >= since)
            .group_by(day)
            .order_by(day.asc())
            .all()
        )
        return [{"date": str(date), "count": count} for date, count in rows]
