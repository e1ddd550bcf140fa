from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from uems.extensions import db
from uems.models import Attendance


class AttendanceRepository:
    @staticmethod
    def find_by_user_and_event(user_id: int, event_id: int) -> Optional[Attendance]:
        return Attendance.query.filter_by(user_id=user_id, event_id=event_id).first()

    @staticmethod
    def create_attendance(attrs, commit: bool = True) -> Attendance:
        """Inserts a check-in. Raises IntegrityError if the user already checked in."""
        attendance = Attendance(**attrs)
        db.session.add(attendance)
        try:
            db.session.flush()
            if commit:
                db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise
        return attendance

    @staticmethod
    def find_by_event_id(event_id: int) -> List[Attendance]:
        return (
            Attendance.query.filter_by(event_id=event_id)
            .order_by(Attendance.check_in_time.asc())
            .all()
        )
