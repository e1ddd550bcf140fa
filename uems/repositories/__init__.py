from uems.repositories.user_repository import UserRepository
from uems.repositories.event_repository import EventRepository
from uems.repositories.registration_repository import RegistrationRepository
from uems.repositories.attendance_repository import AttendanceRepository
from uems.repositories.notification_repository import NotificationRepository
