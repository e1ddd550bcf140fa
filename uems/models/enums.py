from enum import Enum


class EventStatus(Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventCategory(Enum):
    ACADEMIC = "academic"
    CULTURAL = "cultural"
    SPORTS = "sports"
    WORKSHOP = "workshop"
    SEMINAR = "seminar"
    SOCIAL = "social"
    OTHER = "other"


class UserRole(Enum):
    STUDENT = "student"
    ORGANIZER = "organizer"
    ADMIN = "admin"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"


class RegistrationStatus(Enum):
    REGISTERED = "registered"
    ATTENDED = "attended"


class RegistrationSource(Enum):
    DIRECT = "direct"
    SHARED_LINK = "shared_link"


class CheckInStatus(Enum):
    EARLY = "early"
    ON_TIME = "on_time"
    LATE = "late"


class NotificationType(Enum):
    EVENT_APPROVED = "event_approved"
    EVENT_REJECTED = "event_rejected"
    EVENT_CANCELLED = "event_cancelled"
    REGISTRATION_CONFIRMED = "registration_confirmed"
    ATTENDANCE_CHECKED = "attendance_checked"
