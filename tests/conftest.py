from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from uems import create_app
from uems.extensions import db
from uems.models import Event, Registration, User
from uems.models.enums import EventCategory, EventStatus, Gender, UserRole
from uems.utils.dates import utcnow

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
    "RATELIMIT_ENABLED": False,
    "CLIENT_URL": "http://client.test",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make_user(role=UserRole.STUDENT, gender=Gender.PREFER_NOT_TO_SAY, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            student_id=kwargs.pop("student_id", f"STU{n:04d}"),
            email=kwargs.pop("email", f"user{n}@university.edu"),
            first_name=kwargs.pop("first_name", f"First{n}"),
            last_name=kwargs.pop("last_name", f"Last{n}"),
            role=role,
            gender=gender,
            **kwargs,
        )
        user.set_password("password123")
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_event(app):
    def _make_event(creator, status=EventStatus.DRAFT, **kwargs):
        attrs = {
            "title": "Robotics Workshop",
            "description": "Build a line-following robot",
            "category": EventCategory.WORKSHOP,
            "date": utcnow() + timedelta(days=7),
            "location": "Engineering Hall 101",
            "max_attendees": 10,
            "current_attendees": 0,
            "status": status,
            "creator_id": creator.id,
            "tags": ["robots"],
        }
        if status == EventStatus.APPROVED:
            attrs["organizer_id"] = creator.id
        attrs.update(kwargs)
        event = Event(**attrs)
        db.session.add(event)
        db.session.commit()
        return event

    return _make_event


@pytest.fixture
def register(app):
    def _register(event, user):
        registration = Registration(event_id=event.id, user_id=user.id)
        event.current_attendees += 1
        db.session.add(registration)
        db.session.commit()
        return registration

    return _register


@pytest.fixture
def auth_header(app):
    def _auth_header(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_header


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, student_id="ADMIN001")
