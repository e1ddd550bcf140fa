from uems.models.user import User
from uems.models.event import Event
from uems.models.registration import Registration
from uems.models.attendance import Attendance
from uems.models.notification import Notification
from uems.models.enums import (
    CheckInStatus,
    EventCategory,
    EventStatus,
    Gender,
    NotificationType,
    RegistrationSource,
    RegistrationStatus,
    UserRole,
)
