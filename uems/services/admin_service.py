from datetime import timedelta

from flask import current_app

from uems.exceptions import (
    EventNotFoundError,
    ForbiddenError,
    NotPendingError,
    ValidationError,
)
from uems.extensions import db
from uems.models.enums import EventStatus, NotificationType
from uems.repositories import (
    EventRepository,
    RegistrationRepository,
    UserRepository,
)
from uems.services import lifecycle
from uems.services.notification_service import NotificationService
from uems.utils.dates import utcnow
from uems.utils.email import send_event_decision_email

MAX_NOTES_LENGTH = 500


def _require_admin(user):
    if not user or not user.is_admin:
        raise ForbiddenError("Access denied. Admin privileges required.")


def _load_pending_candidate(event_id: int):
    event = EventRepository.get_event(event_id)
    if not event:
        raise EventNotFoundError()
    return event


class AdminService:
    @staticmethod
    def get_pending_events(user, page: int = 1, limit: int = 10):
        _require_admin(user)
        pagination = EventRepository.get_pending_events(page=page, limit=limit)
        return {
            "events": [event.to_dict() for event in pagination.items],
            "current_page": page,
            "total_pages": pagination.pages,
            "total_pending": pagination.total,
        }

    @staticmethod
    def approve_event(event_id: int, admin):
        _require_admin(admin)
        event = _load_pending_candidate(event_id)
        lifecycle.ensure_transition(event.status, EventStatus.APPROVED)

        now = utcnow()
        share_link = f"{current_app.config.get('CLIENT_URL')}/events/{event.id}"
        approved = EventRepository.update_event_status(
            event.id,
            EventStatus.PENDING,
            EventStatus.APPROVED,
            attrs={
                "approved_by_id": admin.id,
                "approved_at": now,
                "organizer_id": event.creator_id,
                "shareable_link": share_link,
                "registration_closed": False,
                "closed_at": None,
                "approval_notes": None,
            },
            commit=False,
        )
        if not approved:
            # Another admin processed it between our read and write
            db.session.rollback()
            current_app.logger.warning(f"Approve lost race for event {event_id}")
            raise NotPendingError()

        promoted = UserRepository.promote_to_organizer(event.creator_id, commit=False)
        NotificationService.notify(
            event.creator_id,
            NotificationType.EVENT_APPROVED,
            "Event Proposal Approved",
            (
                f'Your event "{event.title}" has been approved!'
                + (" You are now an Organizer." if promoted else "")
            ),
            event_id=event.id,
            action_url=f"/events/{event.id}",
            commit=False,
        )
        db.session.commit()

        event = EventRepository.get_event(event_id)
        current_app.logger.info(
            f"Event {event_id} approved by admin {admin.id}; creator promoted={promoted}"
        )
        send_event_decision_email(event.creator, event, approved=True, promoted=promoted)
        return event

    @staticmethod
    def reject_event(event_id: int, admin, rejection_notes):
        _require_admin(admin)
        notes = (rejection_notes or "").strip()
        if not notes:
            raise ValidationError("Rejection notes are required")
        if len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError("Approval notes cannot exceed 500 characters")

        event = _load_pending_candidate(event_id)
        lifecycle.ensure_transition(event.status, EventStatus.REJECTED)

        rejected = EventRepository.update_event_status(
            event.id,
            EventStatus.PENDING,
            EventStatus.REJECTED,
            attrs={
                "approval_notes": notes,
                "approved_by_id": admin.id,
                "approved_at": utcnow(),
            },
            commit=False,
        )
        if not rejected:
            db.session.rollback()
            current_app.logger.warning(f"Reject lost race for event {event_id}")
            raise NotPendingError()

        NotificationService.notify(
            event.creator_id,
            NotificationType.EVENT_REJECTED,
            "Event Proposal Rejected",
            f'Your event "{event.title}" was rejected. Reason: {notes}',
            event_id=event.id,
            action_url=f"/events/proposals/{event.id}",
            commit=False,
        )
        db.session.commit()

        event = EventRepository.get_event(event_id)
        current_app.logger.info(f"Event {event_id} rejected by admin {admin.id}")
        send_event_decision_email(event.creator, event, approved=False, notes=notes)
        return event

    @staticmethod
    def get_statistics(user):
        _require_admin(user)
        week_ago = utcnow() - timedelta(days=7)
        return {
            "event_stats": EventRepository.count_by_status(),
            "user_stats": UserRepository.count_by_role(),
            "recent_activity": {
                "events": EventRepository.count_created_since(week_ago),
                "registrations": RegistrationRepository.count_created_since(week_ago),
            },
            "popular_categories": EventRepository.top_categories(),
        }
