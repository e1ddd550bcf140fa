from datetime import timedelta

from uems.extensions import db
from uems.models import Event
from uems.models.enums import EventStatus
from uems.utils.dates import utcnow


def _proposal_payload(**overrides):
    payload = {
        "title": "Spring Hackathon",
        "description": "24 hours of building things",
        "category": "academic",
        "date": (utcnow() + timedelta(days=10)).isoformat(),
        "location": "Library Auditorium",
        "max_attendees": 50,
        "tags": "coding, prizes",
    }
    payload.update(overrides)
    return payload


def test_create_proposal_starts_as_draft(client, student, auth_header):
    response = client.post(
        "/api/events/proposals", json=_proposal_payload(), headers=auth_header(student)
    )
    assert response.status_code == 201
    event = response.get_json()["data"]["event"]
    assert event["status"] == "draft"
    assert event["current_attendees"] == 0
    assert event["tags"] == ["coding", "prizes"]
    assert event["creator"]["id"] == student.id


def test_create_proposal_reports_missing_fields(client, student, auth_header):
    response = client.post(
        "/api/events/proposals",
        json={"title": "Half an event"},
        headers=auth_header(student),
    )
    body = response.get_json()
    assert response.status_code == 400
    assert body["error"] == "VALIDATION_ERROR"
    assert "description" in body["missing_fields"]


def test_create_proposal_rejects_past_date(client, student, auth_header):
    response = client.post(
        "/api/events/proposals",
        json=_proposal_payload(date=(utcnow() - timedelta(days=1)).isoformat()),
        headers=auth_header(student),
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "Event date must be in the future"


def test_create_proposal_requires_token(client):
    response = client.post("/api/events/proposals", json=_proposal_payload())
    assert response.status_code == 401
    assert response.get_json()["success"] is False


def test_submit_and_cancel_submission(client, student, make_event, auth_header):
    event = make_event(student)

    response = client.post(
        f"/api/events/proposals/{event.id}/submit", headers=auth_header(student)
    )
    assert response.status_code == 200
    assert response.get_json()["data"]["event"]["status"] == "pending"

    response = client.post(
        f"/api/events/proposals/{event.id}/submit", headers=auth_header(student)
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "INVALID_TRANSITION"

    response = client.put(
        f"/api/events/proposals/{event.id}/cancel-submission",
        headers=auth_header(student),
    )
    assert response.status_code == 200
    assert response.get_json()["data"]["event"]["status"] == "draft"


def test_submit_by_other_user_is_forbidden(client, student, make_user, make_event, auth_header):
    event = make_event(student)
    other = make_user()
    response = client.post(
        f"/api/events/proposals/{event.id}/submit", headers=auth_header(other)
    )
    assert response.status_code == 403
    db.session.refresh(event)
    assert event.status == EventStatus.DRAFT


def test_update_proposal_while_pending(client, student, make_event, auth_header):
    event = make_event(student, status=EventStatus.PENDING)
    response = client.put(
        f"/api/events/proposals/{event.id}",
        json={"title": "Renamed Workshop", "max_attendees": 25},
        headers=auth_header(student),
    )
    assert response.status_code == 200
    data = response.get_json()["data"]["event"]
    assert data["title"] == "Renamed Workshop"
    assert data["max_attendees"] == 25


def test_update_approved_proposal_fails(client, student, make_event, auth_header):
    event = make_event(student, status=EventStatus.APPROVED)
    response = client.put(
        f"/api/events/proposals/{event.id}",
        json={"title": "Too late"},
        headers=auth_header(student),
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "Cannot update approved or rejected events"


def test_delete_proposal_only_before_approval(client, student, make_event, auth_header):
    rejected = make_event(student, status=EventStatus.REJECTED)
    approved = make_event(student, status=EventStatus.APPROVED)

    response = client.delete(
        f"/api/events/proposals/{rejected.id}", headers=auth_header(student)
    )
    assert response.status_code == 200
    assert db.session.get(Event, rejected.id) is None

    response = client.delete(
        f"/api/events/proposals/{approved.id}", headers=auth_header(student)
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "INVALID_TRANSITION"


def test_my_events_filters_by_status(client, student, make_event, auth_header):
    make_event(student)
    make_event(student, status=EventStatus.PENDING)

    response = client.get(
        "/api/events/proposals/my-events?status=pending", headers=auth_header(student)
    )
    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["total_events"] == 1
    assert data["events"][0]["status"] == "pending"

    response = client.get(
        "/api/events/proposals/my-events?status=bogus", headers=auth_header(student)
    )
    assert response.status_code == 400


def test_create_proposal_rejects_non_string_title(client, student, auth_header):
    response = client.post(
        "/api/events/proposals",
        json=_proposal_payload(title=123),
        headers=auth_header(student),
    )
    body = response.get_json()
    assert response.status_code == 400
    assert body["error"] == "VALIDATION_ERROR"
    assert body["message"] == "title must be a string"
    assert Event.query.count() == 0


def test_create_proposal_rejects_boolean_capacity(client, student, auth_header):
    response = client.post(
        "/api/events/proposals",
        json=_proposal_payload(max_attendees=True),
        headers=auth_header(student),
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "VALIDATION_ERROR"
