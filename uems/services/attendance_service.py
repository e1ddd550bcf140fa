from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from uems.exceptions import (
    DuplicateAttendanceError,
    EventNotFoundError,
    RegistrationNotFoundError,
    UserNotFoundError,
)
from uems.extensions import db
from uems.models.enums import CheckInStatus, NotificationType, RegistrationStatus
from uems.repositories import (
    AttendanceRepository,
    EventRepository,
    RegistrationRepository,
    UserRepository,
)
from uems.services import lifecycle
from uems.services.notification_service import NotificationService
from uems.utils.dates import ensure_utc, utcnow

# Hours before the event start after which a check-in counts as early
EARLY_THRESHOLD_HOURS = 2
# Hours after the event start after which a check-in counts as late
LATE_THRESHOLD_HOURS = 1


def classify_check_in(
    event_time: datetime, check_in_time: Optional[datetime] = None
) -> CheckInStatus:
    """Classify a check-in relative to the event start.

    ``hours_diff`` is event time minus check-in time. More than two hours
    ahead is early, more than one hour behind is late, anything in between
    (boundaries included) is on time. Naive datetimes are read as UTC.
    """
    event_time = ensure_utc(event_time)
    check_in_time = ensure_utc(check_in_time) if check_in_time else utcnow()

    hours_diff = (event_time - check_in_time).total_seconds() / 3600
    if hours_diff > EARLY_THRESHOLD_HOURS:
        return CheckInStatus.EARLY
    if hours_diff < -LATE_THRESHOLD_HOURS:
        return CheckInStatus.LATE
    return CheckInStatus.ON_TIME


class AttendanceService:
    @staticmethod
    def check_in(event_id: int, user_id: int, actor, check_in_time=None):
        event = EventRepository.get_event(event_id)
        if not event:
            raise EventNotFoundError()
        lifecycle.ensure_can_manage(
            event, actor, "Access denied. Only the event organizer can check in attendees."
        )

        if not UserRepository.find_by_id(user_id):
            raise UserNotFoundError()
        registration = RegistrationRepository.find_by_event_and_user(event_id, user_id)
        if not registration:
            raise RegistrationNotFoundError("User is not registered for this event")

        if AttendanceRepository.find_by_user_and_event(user_id, event_id):
            raise DuplicateAttendanceError()

        check_in_time = ensure_utc(check_in_time) if check_in_time else utcnow()
        status = classify_check_in(event.date, check_in_time)

        try:
            attendance = AttendanceRepository.create_attendance(
                {
                    "event_id": event_id,
                    "user_id": user_id,
                    "check_in_time": check_in_time,
                    "checked_in_by_id": actor.id,
                    "check_in_status": status,
                },
                commit=False,
            )
        except IntegrityError:
            # Lost a race with a concurrent check-in for the same user
            raise DuplicateAttendanceError()

        RegistrationRepository.update_status(
            registration, RegistrationStatus.ATTENDED, commit=False
        )
        NotificationService.notify(
            user_id,
            NotificationType.ATTENDANCE_CHECKED,
            "Checked In",
            f'You were checked in to "{event.title}" ({status.value.replace("_", " ")}).',
            event_id=event_id,
            action_url=f"/events/{event_id}",
            commit=False,
        )
        db.session.commit()

        current_app.logger.info(
            f"User {user_id} checked in to event {event_id} as {status.value} by {actor.id}"
        )
        return attendance
