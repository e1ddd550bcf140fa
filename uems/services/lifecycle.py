"""Event lifecycle rules.

An event moves ``draft -> pending -> approved | rejected`` and may be pulled
back from ``pending`` to ``draft`` by its creator. Approved events carry an
independent ``registration_closed`` flag. These helpers only decide whether
a move is legal; the guarded writes live in ``EventRepository``.
"""

from uems.exceptions import (
    EventFullError,
    ForbiddenError,
    InvalidTransitionError,
    NotApprovedError,
    NotPendingError,
    RegistrationClosedError,
)
from uems.models.enums import EventStatus

# (from, to) -> action name
TRANSITIONS = {
    (EventStatus.DRAFT, EventStatus.PENDING): "submit",
    (EventStatus.PENDING, EventStatus.DRAFT): "cancel submission",
    (EventStatus.PENDING, EventStatus.APPROVED): "approve",
    (EventStatus.PENDING, EventStatus.REJECTED): "reject",
}

EDITABLE_STATUSES = (EventStatus.DRAFT, EventStatus.PENDING)
PROPOSAL_DELETABLE_STATUSES = (
    EventStatus.DRAFT,
    EventStatus.PENDING,
    EventStatus.REJECTED,
)


def can_transition(current: EventStatus, target: EventStatus) -> bool:
    return (current, target) in TRANSITIONS


def ensure_transition(current: EventStatus, target: EventStatus):
    """Raise the error matching an illegal ``current -> target`` move."""
    if can_transition(current, target):
        return
    if target in (EventStatus.APPROVED, EventStatus.REJECTED):
        raise NotPendingError()
    if target == EventStatus.PENDING:
        raise InvalidTransitionError(
            f"Cannot submit event with status: {current.value}. "
            "Only draft events can be submitted."
        )
    if target == EventStatus.DRAFT:
        raise InvalidTransitionError(
            f"Cannot cancel event with status: {current.value}. "
            "Only pending events can be cancelled."
        )
    raise InvalidTransitionError(
        f"Cannot move event from {current.value} to {target.value}"
    )


def ensure_registration_toggle(event, close: bool):
    if event.status != EventStatus.APPROVED:
        action = "closed" if close else "opened"
        raise NotApprovedError(f"Only approved events can have registration {action}")


def ensure_open_for_registration(event):
    if event.status != EventStatus.APPROVED:
        raise NotApprovedError("Event not available for registration")
    if event.registration_closed:
        raise RegistrationClosedError()
    if event.current_attendees >= event.max_attendees:
        raise EventFullError()


def ensure_can_submit(event, user):
    is_creator = event.creator_id == user.id
    is_organizer = event.organizer_id is not None and event.organizer_id == user.id
    if not is_creator and not is_organizer:
        raise ForbiddenError("Not authorized to submit this proposal")


def ensure_is_creator(event, user, action: str):
    if event.creator_id != user.id:
        raise ForbiddenError(f"Not authorized to {action}")


def ensure_can_manage(event, user, message: str = "Access denied. Not authorized for this event."):
    if not event.is_managed_by(user):
        raise ForbiddenError(message)


def ensure_can_delete_proposal(event, user):
    ensure_can_manage(event, user, "Not authorized to delete this proposal")
    if event.status not in PROPOSAL_DELETABLE_STATUSES:
        raise InvalidTransitionError(
            "Admin can only delete draft, pending, or rejected events"
            if user.is_admin
            else "Only draft, pending, or rejected events can be deleted"
        )


def ensure_can_delete(event, user):
    """Admins delete anything; creators and organizers delete their own events."""
    ensure_can_manage(
        event,
        user,
        "Access denied. You can only delete events you created or organized.",
    )
