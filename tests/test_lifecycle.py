import pytest

from uems.exceptions import (
    EventFullError,
    ForbiddenError,
    InvalidTransitionError,
    NotApprovedError,
    NotPendingError,
    RegistrationClosedError,
)
from uems.models.enums import EventStatus
from uems.services import lifecycle


@pytest.mark.parametrize(
    "current,target",
    [
        (EventStatus.DRAFT, EventStatus.PENDING),
        (EventStatus.PENDING, EventStatus.DRAFT),
        (EventStatus.PENDING, EventStatus.APPROVED),
        (EventStatus.PENDING, EventStatus.REJECTED),
    ],
)
def test_allowed_transitions(current, target):
    assert lifecycle.can_transition(current, target)
    lifecycle.ensure_transition(current, target)


@pytest.mark.parametrize(
    "current", [EventStatus.DRAFT, EventStatus.APPROVED, EventStatus.REJECTED]
)
def test_decisions_require_pending(current):
    with pytest.raises(NotPendingError):
        lifecycle.ensure_transition(current, EventStatus.APPROVED)
    with pytest.raises(NotPendingError):
        lifecycle.ensure_transition(current, EventStatus.REJECTED)


def test_submit_requires_draft():
    with pytest.raises(InvalidTransitionError) as exc:
        lifecycle.ensure_transition(EventStatus.APPROVED, EventStatus.PENDING)
    assert "Only draft events can be submitted" in exc.value.message


def test_cancel_requires_pending():
    with pytest.raises(InvalidTransitionError):
        lifecycle.ensure_transition(EventStatus.REJECTED, EventStatus.DRAFT)


def test_rejected_is_terminal():
    assert not lifecycle.can_transition(EventStatus.REJECTED, EventStatus.APPROVED)
    assert not lifecycle.can_transition(EventStatus.APPROVED, EventStatus.DRAFT)


def test_registration_toggle_needs_approved(make_event, student):
    event = make_event(student, status=EventStatus.DRAFT)
    with pytest.raises(NotApprovedError):
        lifecycle.ensure_registration_toggle(event, close=True)


def test_open_for_registration_checks(make_event, student):
    event = make_event(student, status=EventStatus.APPROVED, max_attendees=1)
    lifecycle.ensure_open_for_registration(event)

    event.registration_closed = True
    with pytest.raises(RegistrationClosedError):
        lifecycle.ensure_open_for_registration(event)

    event.registration_closed = False
    event.current_attendees = 1
    with pytest.raises(EventFullError):
        lifecycle.ensure_open_for_registration(event)


def test_only_managers_can_delete(make_event, make_user, student):
    event = make_event(student)
    stranger = make_user()
    with pytest.raises(ForbiddenError):
        lifecycle.ensure_can_delete(event, stranger)
    lifecycle.ensure_can_delete(event, student)
