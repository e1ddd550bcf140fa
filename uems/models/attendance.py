from uems.extensions import db
from .enums import CheckInStatus


class Attendance(db.Model):
    __tablename__ = "attendance"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(
        db.Integer, db.ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    check_in_time = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    checked_in_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    check_in_status = db.Column(
        db.Enum(CheckInStatus), nullable=False, default=CheckInStatus.ON_TIME
    )
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    # One check-in per user per event
    __table_args__ = (
        db.UniqueConstraint("event_id", "user_id", name="uq_attendance_event_user"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "check_in_time": (
                self.check_in_time.isoformat() if self.check_in_time else None
            ),
            "checked_in_by_id": self.checked_in_by_id,
            "check_in_status": (
                self.check_in_status.value if self.check_in_status else None
            ),
        }

    def __repr__(self):
        return (
            f"Attendance("
            f"event_id={self.event_id}, "
            f"user_id={self.user_id}, "
            f"check_in_status={self.check_in_status}"
            f")"
        )
