from datetime import timedelta

from uems.models.enums import EventStatus, UserRole
from uems.utils.dates import utcnow


def _portfolio(make_event, owner):
    """Three approved events (high, low, average fill) plus one of each other status."""
    make_event(owner, status=EventStatus.APPROVED, max_attendees=10, current_attendees=8)
    make_event(owner, status=EventStatus.APPROVED, max_attendees=10, current_attendees=1)
    make_event(owner, status=EventStatus.APPROVED, max_attendees=10, current_attendees=5)
    make_event(owner, status=EventStatus.PENDING)
    make_event(owner, status=EventStatus.DRAFT)
    make_event(owner, status=EventStatus.REJECTED)


def test_active_count_counts_future_unrejected_own_events(client, make_user, make_event, auth_header):
    organizer = make_user(role=UserRole.ORGANIZER)
    other = make_user(role=UserRole.ORGANIZER)
    make_event(organizer, status=EventStatus.APPROVED)
    make_event(organizer, status=EventStatus.PENDING)
    make_event(organizer, status=EventStatus.REJECTED)
    make_event(organizer, status=EventStatus.APPROVED, date=utcnow() - timedelta(days=1))
    # Organized but created by someone else
    make_event(other, status=EventStatus.APPROVED, organizer_id=organizer.id)

    response = client.get("/api/events/active-count", headers=auth_header(organizer))
    assert response.status_code == 200
    assert response.get_json()["data"] == {"active_event_count": 2}


def test_active_count_forbidden_for_students(client, student, auth_header):
    response = client.get("/api/events/active-count", headers=auth_header(student))
    assert response.status_code == 403
    assert response.get_json()["error"] == "FORBIDDEN"


def test_organizer_analytics_summary(client, student, make_user, make_event, auth_header):
    _portfolio(make_event, student)
    make_event(make_user(), status=EventStatus.APPROVED, current_attendees=9)

    response = client.get("/api/events/organizer/analytics", headers=auth_header(student))
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert len(data["events"]) == 6
    assert data["analytics"]["summary"] == {
        "total_events": 6,
        "approved_events": 3,
        "pending_events": 1,
        "draft_events": 1,
        "rejected_events": 1,
        "total_registrations": 14,
        "total_capacity": 30,
        "avg_fill_rate": 47,
    }
    assert data["analytics"]["performance"] == {
        "high_performance_events": 1,
        "low_performance_events": 1,
        "average_performance": 1,
    }


def test_organizer_analytics_for_new_user_is_empty(client, student, auth_header):
    response = client.get("/api/events/organizer/analytics", headers=auth_header(student))
    summary = response.get_json()["data"]["analytics"]["summary"]
    assert summary["total_events"] == 0
    assert summary["avg_fill_rate"] == 0


def test_admin_views_organizer_analytics(client, admin, student, make_event, auth_header):
    _portfolio(make_event, student)
    make_event(
        student,
        status=EventStatus.APPROVED,
        date=utcnow() - timedelta(days=3),
        created_at=utcnow() - timedelta(days=30),
    )

    response = client.get(
        f"/api/admin/organizer-analytics/{student.id}", headers=auth_header(admin)
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["organizer"]["id"] == student.id
    assert data["summary"]["total_events"] == 7
    assert data["summary"]["approved_events"] == 4
    assert data["summary"]["upcoming_events"] == 3
    assert data["summary"]["recent_events"] == 6
    assert sorted(e["fill_rate"] for e in data["upcoming_events"]) == [10, 50, 80]


def test_organizer_reads_own_analytics_but_not_others(client, student, make_user, auth_header):
    other = make_user()

    response = client.get(
        f"/api/admin/organizer-analytics/{student.id}", headers=auth_header(student)
    )
    assert response.status_code == 200

    response = client.get(
        f"/api/admin/organizer-analytics/{other.id}", headers=auth_header(student)
    )
    assert response.status_code == 403


def test_organizer_analytics_unknown_user(client, admin, auth_header):
    response = client.get("/api/admin/organizer-analytics/404", headers=auth_header(admin))
    assert response.status_code == 404
    assert response.get_json()["error"] == "USER_NOT_FOUND"


def test_comprehensive_analytics(client, admin, student, make_user, make_event, register, auth_header):
    make_user(is_active=False)
    popular = make_event(
        student, status=EventStatus.APPROVED, max_attendees=10, current_attendees=7
    )
    make_event(student, status=EventStatus.APPROVED, max_attendees=10, current_attendees=1)
    make_event(student, status=EventStatus.PENDING)
    register(popular, make_user())

    response = client.get("/api/admin/analytics/comprehensive", headers=auth_header(admin))
    assert response.status_code == 200
    data = response.get_json()["data"]

    summary = data["summary"]
    assert summary["total_events"] == 3
    assert summary["total_users"] == 4
    assert summary["active_users"] == 3
    assert summary["approval_rate"] == 67
    assert summary["user_activity_rate"] == 75
    # 0.4 * 67 + 0.4 * 75 + 10 for three events this week
    assert summary["system_health_score"] == 67
    assert data["insights"]["health_level"] == "Good"
    assert data["insights"]["recommendations"] == [
        "Low event count: Encourage more event creation.",
    ]

    top = data["performance"]["top_events"]
    assert [e["id"] for e in top] == [popular.id]
    assert top[0]["fill_rate"] == 80

    trends = data["trends"]
    assert trends["total_registrations"] == 1
    assert trends["daily_average"] == 1
    assert trends["peak_day"]["count"] == 1
    assert data["statistics"]["event_stats"] == {"approved": 2, "pending": 1}


def test_comprehensive_analytics_requires_admin(client, student, auth_header):
    response = client.get("/api/admin/analytics/comprehensive", headers=auth_header(student))
    assert response.status_code == 403
