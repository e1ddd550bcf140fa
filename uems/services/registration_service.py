from flask import current_app
from sqlalchemy.exc import IntegrityError

from uems.exceptions import (
    AlreadyRegisteredError,
    EventFullError,
    EventNotFoundError,
    RegistrationNotFoundError,
    ValidationError,
)
from uems.models.enums import (
    Gender,
    NotificationType,
    RegistrationSource,
    RegistrationStatus,
)
from uems.repositories import (
    AttendanceRepository,
    EventRepository,
    RegistrationRepository,
)
from uems.services import lifecycle
from uems.services.notification_service import NotificationService


def _load_event(event_id: int):
    event = EventRepository.get_event(event_id)
    if not event:
        raise EventNotFoundError()
    return event


def _parse_source(value):
    if not value:
        return RegistrationSource.DIRECT
    try:
        return RegistrationSource(value)
    except ValueError:
        raise ValidationError(f"Invalid registration source: {value}")


class RegistrationService:
    @staticmethod
    def register_for_event(event_id: int, user, source=None):
        event = _load_event(event_id)
        lifecycle.ensure_open_for_registration(event)
        if RegistrationRepository.find_by_event_and_user(event_id, user.id):
            raise AlreadyRegisteredError()

        try:
            registration = RegistrationRepository.register_with_seat(
                event_id, user.id, _parse_source(source)
            )
        except IntegrityError:
            raise AlreadyRegisteredError()

        if registration is None:
            # The guarded increment matched nothing; work out which rule failed
            event = _load_event(event_id)
            lifecycle.ensure_open_for_registration(event)
            raise EventFullError()

        NotificationService.notify(
            user.id,
            NotificationType.REGISTRATION_CONFIRMED,
            "Registration Confirmed",
            f'You are registered for "{event.title}".',
            event_id=event_id,
            action_url=f"/events/{event_id}",
        )
        current_app.logger.info(f"User {user.id} registered for event {event_id}")
        return registration

    @staticmethod
    def unregister_from_event(event_id: int, user):
        _load_event(event_id)
        registration = RegistrationRepository.find_by_event_and_user(event_id, user.id)
        if not registration:
            raise RegistrationNotFoundError()
        if registration.status == RegistrationStatus.ATTENDED:
            raise ValidationError("Cannot unregister after checking in to the event")
        RegistrationRepository.delete_and_release_seat(registration)
        current_app.logger.info(f"User {user.id} unregistered from event {event_id}")

    @staticmethod
    def mark_attended(event_id: int, registration_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_manage(event, user)
        registration = RegistrationRepository.find_by_id(registration_id)
        if not registration or registration.event_id != event.id:
            raise RegistrationNotFoundError()
        return RegistrationRepository.update_status(
            registration, RegistrationStatus.ATTENDED
        )

    @staticmethod
    def get_attendance_list(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_manage(event, user)

        registrations = RegistrationRepository.find_with_users(event_id)
        check_ins = {
            record.user_id: record
            for record in AttendanceRepository.find_by_event_id(event_id)
        }
        grouped = {gender.value: [] for gender in Gender}
        for registration in registrations:
            attendee = registration.user
            check_in = check_ins.get(attendee.id)
            grouped[attendee.gender.value].append(
                {
                    "registration_id": registration.id,
                    "status": registration.status.value,
                    "registered_at": (
                        registration.registered_at.isoformat()
                        if registration.registered_at
                        else None
                    ),
                    **attendee.to_summary(),
                    "email": attendee.email,
                    "check_in_status": (
                        check_in.check_in_status.value if check_in else None
                    ),
                    "check_in_time": (
                        check_in.check_in_time.isoformat() if check_in else None
                    ),
                }
            )

        return {
            "event": {
                "id": event.id,
                "title": event.title,
                "date": event.date.isoformat() if event.date else None,
                "location": event.location,
            },
            "attendees_by_gender": grouped,
            "counts": {gender: len(people) for gender, people in grouped.items()},
            "total_attendees": len(registrations),
        }
