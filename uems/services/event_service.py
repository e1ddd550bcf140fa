from flask import current_app

from uems.exceptions import EventNotFoundError, ValidationError
from uems.extensions import db
from uems.models.enums import EventCategory, EventStatus, NotificationType
from uems.repositories import EventRepository, RegistrationRepository
from uems.services import lifecycle
from uems.services.notification_service import NotificationService
from uems.utils.dates import utcnow


def _load_event(event_id: int):
    event = EventRepository.get_event(event_id)
    if not event:
        raise EventNotFoundError()
    return event


class EventService:
    @staticmethod
    def get_events(category=None, search=None, page: int = 1, limit: int = 10):
        category_filter = None
        if category:
            try:
                category_filter = EventCategory(category.lower())
            except ValueError:
                raise ValidationError(f"Invalid category: {category}")

        pagination = EventRepository.get_public_events(
            category=category_filter,
            search=(search or "").strip() or None,
            page=page,
            limit=limit,
        )
        return {
            "events": [event.to_dict() for event in pagination.items],
            "current_page": page,
            "total_pages": pagination.pages,
            "total_events": pagination.total,
        }

    @staticmethod
    def get_event(event_id: int, user=None):
        """Approved events are public, anything else only for the people managing it."""
        event = _load_event(event_id)
        if event.status != EventStatus.APPROVED and not event.is_managed_by(user):
            # Hide unpublished events instead of admitting they exist
            raise EventNotFoundError()

        event_data = event.to_dict()
        if user:
            registration = RegistrationRepository.find_by_event_and_user(event.id, user.id)
            event_data["user_registration"] = (
                registration.to_dict() if registration else None
            )
        return event_data

    @staticmethod
    def close_registration(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_manage(event, user)
        lifecycle.ensure_registration_toggle(event, close=True)
        if event.registration_closed:
            raise ValidationError("Registration is already closed for this event")

        if not EventRepository.set_registration_closed(event.id, True, utcnow()):
            event = _load_event(event_id)
            lifecycle.ensure_registration_toggle(event, close=True)
            raise ValidationError("Registration is already closed for this event")

        current_app.logger.info(f"Registration closed for event {event_id} by user {user.id}")
        return _load_event(event_id)

    @staticmethod
    def open_registration(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_manage(event, user)
        lifecycle.ensure_registration_toggle(event, close=False)
        if not event.registration_closed:
            raise ValidationError("Registration is already open for this event")

        if not EventRepository.set_registration_closed(event.id, False, None):
            event = _load_event(event_id)
            lifecycle.ensure_registration_toggle(event, close=False)
            raise ValidationError("Registration is already open for this event")

        current_app.logger.info(f"Registration opened for event {event_id} by user {user.id}")
        return _load_event(event_id)

    @staticmethod
    def delete_event(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_delete(event, user)
        title = event.title
        attendee_ids = []
        if event.status == EventStatus.APPROVED:
            attendee_ids = [
                r.user_id for r in RegistrationRepository.find_with_users(event.id)
            ]

        EventRepository.delete_event(event)
        for attendee_id in attendee_ids:
            # Not linked to the event row, which no longer exists
            NotificationService.notify(
                attendee_id,
                NotificationType.EVENT_CANCELLED,
                "Event Cancelled",
                f'"{title}" has been cancelled by its organizers.',
                commit=False,
            )
        db.session.commit()
        current_app.logger.info(
            f"Event {event_id} ({title}) deleted by user {user.id}; "
            f"{len(attendee_ids)} attendees notified"
        )
