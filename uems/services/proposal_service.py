from flask import current_app

from uems.exceptions import EventNotFoundError, MissingFieldsError, ValidationError
from uems.models.enums import EventCategory, EventStatus
from uems.repositories import EventRepository
from uems.services import lifecycle
from uems.utils.dates import parse_iso_datetime, utcnow

REQUIRED_FIELDS = [
    "title",
    "description",
    "category",
    "date",
    "location",
    "max_attendees",
]


def _parse_tags(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, list):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    raise ValidationError("Tags must be a comma separated string or a list")


def _string_field(data: dict, field: str) -> str:
    value = data[field]
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def _parse_event_fields(data: dict, partial: bool = False) -> dict:
    """Validate proposal fields and convert them to column values.

    With ``partial`` only the fields present in ``data`` are checked, which is
    what proposal edits need.
    """
    if not partial:
        missing = [
            f for f in REQUIRED_FIELDS if data.get(f) is None or data.get(f) == ""
        ]
        if missing:
            raise MissingFieldsError(missing)

    attrs = {}
    if "title" in data:
        title = _string_field(data, "title")
        if not title:
            raise ValidationError("Event title is required")
        if len(title) > 100:
            raise ValidationError("Title cannot exceed 100 characters")
        attrs["title"] = title

    if "description" in data:
        description = _string_field(data, "description")
        if not description:
            raise ValidationError("Event description is required")
        if len(description) > 2000:
            raise ValidationError("Description cannot exceed 2000 characters")
        attrs["description"] = description

    if "category" in data:
        try:
            attrs["category"] = EventCategory(str(data["category"]).lower())
        except ValueError:
            raise ValidationError(f"Invalid category: {data['category']}")

    if "date" in data:
        try:
            date = parse_iso_datetime(data["date"])
        except ValueError:
            raise ValidationError("Invalid date format for date")
        if date <= utcnow():
            raise ValidationError("Event date must be in the future")
        attrs["date"] = date

    if "location" in data:
        location = _string_field(data, "location")
        if not location:
            raise ValidationError("Event location is required")
        attrs["location"] = location

    if "max_attendees" in data:
        if isinstance(data["max_attendees"], bool):
            raise ValidationError("Invalid format for max_attendees, must be an integer")
        try:
            max_attendees = int(data["max_attendees"])
        except (TypeError, ValueError):
            raise ValidationError("Invalid format for max_attendees, must be an integer")
        if max_attendees < 1:
            raise ValidationError("Must have at least 1 attendee")
        attrs["max_attendees"] = max_attendees

    if "tags" in data:
        attrs["tags"] = _parse_tags(data["tags"])

    return attrs


def _load_event(event_id: int):
    event = EventRepository.get_event(event_id)
    if not event:
        raise EventNotFoundError("Event proposal not found")
    return event


class ProposalService:
    @staticmethod
    def create_proposal(data: dict, user):
        attrs = _parse_event_fields(data)
        attrs.setdefault("tags", [])
        attrs.update(
            {
                "creator_id": user.id,
                "status": EventStatus.DRAFT,
                "current_attendees": 0,
                "registration_closed": False,
            }
        )
        event = EventRepository.create_event(attrs)
        current_app.logger.info(f"User {user.id} created draft event {event.id}")
        return event

    @staticmethod
    def submit_proposal(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_submit(event, user)
        lifecycle.ensure_transition(event.status, EventStatus.PENDING)

        if not EventRepository.update_event_status(
            event.id, EventStatus.DRAFT, EventStatus.PENDING
        ):
            event = _load_event(event_id)
            lifecycle.ensure_transition(event.status, EventStatus.PENDING)

        current_app.logger.info(f"Event {event_id} submitted for approval by user {user.id}")
        return _load_event(event_id)

    @staticmethod
    def cancel_submission(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_is_creator(event, user, "cancel this submission")
        lifecycle.ensure_transition(event.status, EventStatus.DRAFT)

        if not EventRepository.update_event_status(
            event.id, EventStatus.PENDING, EventStatus.DRAFT
        ):
            event = _load_event(event_id)
            lifecycle.ensure_transition(event.status, EventStatus.DRAFT)

        current_app.logger.info(f"Event {event_id} returned to draft by user {user.id}")
        return _load_event(event_id)

    @staticmethod
    def update_proposal(event_id: int, data: dict, user):
        event = _load_event(event_id)
        lifecycle.ensure_is_creator(event, user, "update this proposal")
        if event.status not in lifecycle.EDITABLE_STATUSES:
            raise ValidationError("Cannot update approved or rejected events")

        attrs = _parse_event_fields(data, partial=True)
        if not attrs:
            raise ValidationError("No valid fields provided for update")
        if attrs.get("max_attendees", event.max_attendees) < event.current_attendees:
            raise ValidationError("Maximum attendees cannot be below current registrations")
        return EventRepository.update_event(event, attrs)

    @staticmethod
    def delete_proposal(event_id: int, user):
        event = _load_event(event_id)
        lifecycle.ensure_can_delete_proposal(event, user)
        status = event.status.value
        EventRepository.delete_event(event)
        current_app.logger.info(f"Event {event_id} ({status}) deleted by user {user.id}")

    @staticmethod
    def get_my_proposals(user, status=None, page: int = 1, limit: int = 10):
        status_filter = None
        if status:
            try:
                status_filter = EventStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status value: {status}")

        pagination = EventRepository.get_events_by_creator(
            user.id, status=status_filter, page=page, limit=limit
        )
        return {
            "events": [event.to_dict() for event in pagination.items],
            "current_page": page,
            "total_pages": pagination.pages,
            "total_events": pagination.total,
        }
