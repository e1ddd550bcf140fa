import pytest

from uems.exceptions import ValidationError
from uems.extensions import db
from uems.models import Event, Notification, Registration
from uems.models.enums import EventCategory, EventStatus, NotificationType, UserRole
from uems.repositories import EventRepository
from uems.services.event_service import EventService
from uems.utils.dates import utcnow


def test_list_shows_only_approved_public_events(client, student, make_event):
    approved = make_event(student, status=EventStatus.APPROVED, title="Chess Night")
    make_event(student, status=EventStatus.PENDING)
    make_event(student, status=EventStatus.APPROVED, is_public=False)

    response = client.get("/api/events")
    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["total_events"] == 1
    assert data["events"][0]["id"] == approved.id


def test_list_filters_by_category_and_search(client, student, make_event):
    make_event(
        student,
        status=EventStatus.APPROVED,
        title="Chess Night",
        description="Casual games in the student lounge",
        category=EventCategory.SOCIAL,
        tags=["board games"],
    )
    make_event(student, status=EventStatus.APPROVED, title="Robotics Workshop")

    response = client.get("/api/events?category=social")
    assert [e["title"] for e in response.get_json()["data"]["events"]] == ["Chess Night"]

    response = client.get("/api/events?search=robot")
    assert [e["title"] for e in response.get_json()["data"]["events"]] == [
        "Robotics Workshop"
    ]

    response = client.get("/api/events?category=parties")
    assert response.status_code == 400


def test_unapproved_event_hidden_from_others(client, student, make_user, make_event, auth_header):
    event = make_event(student, status=EventStatus.PENDING)

    assert client.get(f"/api/events/{event.id}").status_code == 404
    assert (
        client.get(f"/api/events/{event.id}", headers=auth_header(make_user())).status_code
        == 404
    )
    response = client.get(f"/api/events/{event.id}", headers=auth_header(student))
    assert response.status_code == 200


def test_event_detail_includes_user_registration(
    client, student, make_user, make_event, register, auth_header
):
    attendee = make_user()
    event = make_event(student, status=EventStatus.APPROVED)
    register(event, attendee)

    response = client.get(f"/api/events/{event.id}", headers=auth_header(attendee))
    data = response.get_json()["data"]["event"]
    assert data["user_registration"]["status"] == "registered"
    assert data["available_slots"] == 9


def test_close_registration_on_draft_is_not_approved(client, student, make_event, auth_header):
    event = make_event(student)
    response = client.patch(
        f"/api/events/{event.id}/close-registration", headers=auth_header(student)
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "NOT_APPROVED"


def test_close_and_open_registration(client, student, make_event, auth_header):
    event = make_event(student, status=EventStatus.APPROVED)

    response = client.patch(
        f"/api/events/{event.id}/close-registration", headers=auth_header(student)
    )
    data = response.get_json()["data"]["event"]
    assert response.status_code == 200
    assert data["registration_closed"] is True
    assert data["closed_at"] is not None

    response = client.patch(
        f"/api/events/{event.id}/close-registration", headers=auth_header(student)
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "VALIDATION_ERROR"

    response = client.patch(
        f"/api/events/{event.id}/open-registration", headers=auth_header(student)
    )
    data = response.get_json()["data"]["event"]
    assert data["registration_closed"] is False
    assert data["closed_at"] is None


def test_close_registration_by_stranger_forbidden(client, student, make_user, make_event, auth_header):
    event = make_event(student, status=EventStatus.APPROVED)
    response = client.patch(
        f"/api/events/{event.id}/close-registration", headers=auth_header(make_user())
    )
    assert response.status_code == 403


def test_delete_event_cascades(client, admin, student, make_user, make_event, register, auth_header):
    event = make_event(student, status=EventStatus.APPROVED)
    register(event, make_user())
    event_id = event.id

    response = client.delete(f"/api/events/{event_id}", headers=auth_header(admin))
    assert response.status_code == 200
    assert db.session.get(Event, event_id) is None
    assert Registration.query.filter_by(event_id=event_id).count() == 0


def test_delete_event_by_other_organizer_forbidden(client, student, make_user, make_event, auth_header):
    event = make_event(student, status=EventStatus.APPROVED)
    other = make_user(role=UserRole.ORGANIZER)
    response = client.delete(f"/api/events/{event.id}", headers=auth_header(other))
    assert response.status_code == 403


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["success"] is True


def test_delete_approved_event_notifies_attendees(client, student, make_user, make_event, register, auth_header):
    event = make_event(student, status=EventStatus.APPROVED, title="Chess Night")
    attendee = make_user()
    register(event, attendee)

    response = client.delete(f"/api/events/{event.id}", headers=auth_header(student))
    assert response.status_code == 200

    notification = Notification.query.filter_by(user_id=attendee.id).one()
    assert notification.type == NotificationType.EVENT_CANCELLED
    assert "Chess Night" in notification.message
    assert notification.related_event_id is None
    assert Notification.query.filter_by(user_id=student.id).count() == 0


def test_delete_draft_event_sends_nothing(client, student, make_event, auth_header):
    event = make_event(student)
    response = client.delete(f"/api/events/{event.id}", headers=auth_header(student))
    assert response.status_code == 200
    assert Notification.query.count() == 0


def _flag_flipped_elsewhere(monkeypatch, closed):
    """Commit a competing registration toggle just before the guarded UPDATE runs."""
    guarded_toggle = EventRepository.set_registration_closed

    def competing_toggle_first(event_id, *args, **kwargs):
        Event.query.filter_by(id=event_id).update(
            {Event.registration_closed: closed}, synchronize_session=False
        )
        db.session.commit()
        return guarded_toggle(event_id, *args, **kwargs)

    monkeypatch.setattr(
        EventRepository, "set_registration_closed", staticmethod(competing_toggle_first)
    )


def test_close_registration_after_concurrent_close(app, student, make_event, monkeypatch):
    event = make_event(student, status=EventStatus.APPROVED)
    _flag_flipped_elsewhere(monkeypatch, closed=True)

    with pytest.raises(ValidationError, match="already closed"):
        EventService.close_registration(event.id, student)

    db.session.refresh(event)
    assert event.registration_closed is True
    assert event.closed_at is None


def test_open_registration_after_concurrent_open(app, student, make_event, monkeypatch):
    closed_at = utcnow()
    event = make_event(
        student, status=EventStatus.APPROVED, registration_closed=True, closed_at=closed_at
    )
    _flag_flipped_elsewhere(monkeypatch, closed=False)

    with pytest.raises(ValidationError, match="already open"):
        EventService.open_registration(event.id, student)

    db.session.refresh(event)
    assert event.registration_closed is False
    assert event.closed_at is not None
