from uems.extensions import db
from .enums import EventCategory, EventStatus


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.Enum(EventCategory), nullable=False)
    date = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    max_attendees = db.Column(db.Integer, nullable=False)
    current_attendees = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.Enum(EventStatus), nullable=False, default=EventStatus.DRAFT)
    registration_closed = db.Column(db.Boolean, nullable=False, default=False)
    closed_at = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    approval_notes = db.Column(db.String(500), nullable=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    organizer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_at = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    shareable_link = db.Column(db.String(255), unique=True, nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    creator = db.relationship("User", foreign_keys=[creator_id])
    organizer = db.relationship("User", foreign_keys=[organizer_id])
    approved_by = db.relationship("User", foreign_keys=[approved_by_id])

    __table_args__ = (
        db.CheckConstraint("max_attendees >= 1", name="ck_events_max_attendees"),
        db.CheckConstraint(
            "current_attendees >= 0 AND current_attendees <= max_attendees",
            name="ck_events_attendee_capacity",
        ),
    )

    @property
    def available_slots(self):
        return self.max_attendees - (self.current_attendees or 0)

    def is_managed_by(self, user) -> bool:
        """Creator, assigned organizer and admins may manage an event."""
        if user is None:
            return False
        return (
            user.is_admin
            or self.creator_id == user.id
            or (self.organizer_id is not None and self.organizer_id == user.id)
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value if self.category else None,
            "date": self.date.isoformat() if self.date else None,
            "location": self.location,
            "max_attendees": self.max_attendees,
            "current_attendees": self.current_attendees,
            "available_slots": self.available_slots,
            "status": self.status.value if self.status else None,
            "registration_closed": self.registration_closed,
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "approval_notes": self.approval_notes,
            "creator": self.creator.to_summary() if self.creator else None,
            "organizer": self.organizer.to_summary() if self.organizer else None,
            "approved_at": (
                self.approved_at.isoformat() if self.approved_at else None
            ),
            "shareable_link": self.shareable_link,
            "tags": self.tags or [],
            "is_public": self.is_public,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return (
            f"Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"status={self.status}, "
            f"attendees={self.current_attendees}/{self.max_attendees}"
            f")"
        )
