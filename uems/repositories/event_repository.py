from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import or_

from uems.extensions import db
from uems.models import Attendance, Event, Notification, Registration
from uems.models.enums import EventStatus


def _owned_by(user_id: int):
    return or_(Event.creator_id == user_id, Event.organizer_id == user_id)


class EventRepository:
    @staticmethod
    def get_event(event_id: int) -> Optional[Event]:
        return Event.query.filter_by(id=event_id).first()

    @staticmethod
    def create_event(attrs) -> Event:
        event = Event(**attrs)
        db.session.add(event)
        db.session.commit()
        return event

    @staticmethod
    def update_event(event: Event, attrs: dict) -> Event:
        for key, value in attrs.items():
            if hasattr(event, key):
                setattr(event, key, value)
        db.session.commit()
        return event

    @staticmethod
    def delete_event(event: Event):
        """Deletes an event together with its registrations, check-ins and notifications."""
        try:
            Registration.query.filter_by(event_id=event.id).delete()
            Attendance.query.filter_by(event_id=event.id).delete()
            Notification.query.filter_by(related_event_id=event.id).delete()
            db.session.delete(event)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    def update_event_status(
        event_id: int,
        expected: EventStatus,
        new_status: EventStatus,
        attrs: Optional[dict] = None,
        commit: bool = True,
    ) -> bool:
        """Moves an event from ``expected`` to ``new_status`` in a single guarded UPDATE.

        Returns False when the row was not in ``expected`` any more, in which
        case nothing is written.
        """
        values = {Event.status: new_status}
        for key, value in (attrs or {}).items():
            values[getattr(Event, key)] = value

        updated = (
            Event.query.filter(Event.id == event_id, Event.status == expected)
            .update(values, synchronize_session=False)
        )
        if commit:
            db.session.commit()
        return updated == 1

    @staticmethod
    def set_registration_closed(
        event_id: int, closed: bool, closed_at: Optional[datetime]
    ) -> bool:
        """Flips ``registration_closed`` on an approved event whose flag differs."""
        updated = (
            Event.query.filter(
                Event.id == event_id,
                Event.status == EventStatus.APPROVED,
                Event.registration_closed.is_(not closed),
            )
            .update(
                {Event.registration_closed: closed, Event.closed_at: closed_at},
                synchronize_session=False,
            )
        )
        db.session.commit()
        return updated == 1

    @staticmethod
    def increment_attendee_count(event_id: int, commit: bool = True) -> bool:
        """Claims one seat if the event is approved, open and below capacity.

        The capacity check and the increment run as one statement so that
        concurrent registrations cannot push the count past max_attendees.
        """
        updated = (
            Event.query.filter(
                Event.id == event_id,
                Event.status == EventStatus.APPROVED,
                Event.registration_closed.is_(False),
                Event.current_attendees < Event.max_attendees,
            )
            .update(
                {Event.current_attendees: Event.current_attendees + 1},
                synchronize_session=False,
            )
        )
        if commit:
            db.session.commit()
        return updated == 1

    @staticmethod
    def decrement_attendee_count(event_id: int, commit: bool = True) -> bool:
        updated = (
            Event.query.filter(Event.id == event_id, Event.current_attendees > 0)
            .update(
                {Event.current_attendees: Event.current_attendees - 1},
                synchronize_session=False,
            )
        )
        if commit:
            db.session.commit()
        return updated == 1

    @staticmethod
    def get_public_events(category=None, search=None, page: int = 1, limit: int = 10):
        query = Event.query.filter(
            Event.status == EventStatus.APPROVED, Event.is_public.is_(True)
        )
        if category:
            query = query.filter(Event.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Event.title.ilike(pattern),
                    Event.description.ilike(pattern),
                    db.cast(Event.tags, db.String).ilike(pattern),
                )
            )
        return query.order_by(Event.date.asc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def get_events_by_creator(user_id: int, status=None, page: int = 1, limit: int = 10):
        query = Event.query.filter(Event.creator_id == user_id)
        if status:
            query = query.filter(Event.status == status)
        return query.order_by(Event.created_at.desc(), Event.id.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def get_pending_events(page: int = 1, limit: int = 10):
        return (
            Event.query.filter(Event.status == EventStatus.PENDING)
            .order_by(Event.created_at.asc(), Event.id.asc())
            .paginate(page=page, per_page=limit, error_out=False)
        )

    @staticmethod
    def count_by_status(user_id: Optional[int] = None) -> Dict[str, int]:
        """Events per status, optionally limited to those a user created or organizes."""
        query = db.session.query(Event.status, db.func.count(Event.id))
        if user_id is not None:
            query = query.filter(_owned_by(user_id))
        rows = query.group_by(Event.status).all()
        return {status.value: count for status, count in rows}

    @staticmethod
    def count_created_since(since: datetime, user_id: Optional[int] = None) -> int:
        query = Event.query.filter(Event.created_at >= since)
        if user_id is not None:
            query = query.filter(_owned_by(user_id))
        return query.count()

    @staticmethod
    def get_events_for_user(user_id: int) -> List[Event]:
        return (
            Event.query.filter(_owned_by(user_id))
            .order_by(Event.created_at.desc(), Event.id.desc())
            .all()
        )

    @staticmethod
    def count_active_for_creator(user_id: int, now: datetime) -> int:
        return Event.query.filter(
            Event.creator_id == user_id,
            Event.date > now,
            Event.status != EventStatus.REJECTED,
        ).count()

    @staticmethod
    def top_filled_events(min_fill_rate: int = 70, limit: int = 5) -> List[Event]:
        fill_rate = Event.current_attendees * 100.0 / Event.max_attendees
        return (
            Event.query.filter(
                Event.status == EventStatus.APPROVED,
                Event.max_attendees > 0,
                fill_rate >= min_fill_rate,
            )
            .order_by(fill_rate.desc(), Event.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def top_categories(limit: int = 5) -> List[dict]:
        count = db.func.count(Event.id)
        rows = (
            db.session.query(Event.category, count)
            .filter(Event.status == EventStatus.APPROVED)
            .group_by(Event.category)
            .order_by(count.desc())
            .limit(limit)
            .all()
        )
        return [{"category": category.value, "count": total} for category, total in rows]
