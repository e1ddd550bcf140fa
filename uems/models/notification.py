from uems.extensions import db
from .enums import NotificationType


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type = db.Column(db.Enum(NotificationType), nullable=False)
    title = db.Column(db.String(100), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    related_event_id = db.Column(
        db.Integer, db.ForeignKey("events.id", ondelete="CASCADE"), nullable=True
    )
    action_url = db.Column(db.String(255), nullable=True)
    action_text = db.Column(db.String(50), nullable=False, default="View Details")
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    read_at = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type.value if self.type else None,
            "title": self.title,
            "message": self.message,
            "related_event_id": self.related_event_id,
            "action_url": self.action_url,
            "action_text": self.action_text,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Notification user_id={self.user_id} type={self.type} read={self.is_read}>"
