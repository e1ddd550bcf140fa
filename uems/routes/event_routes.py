from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from uems.exceptions import MissingFieldsError, ValidationError
from uems.services.analytics_service import AnalyticsService
from uems.services.attendance_service import AttendanceService
from uems.services.event_service import EventService
from uems.services.registration_service import RegistrationService
from uems.utils.auth import get_current_user
from uems.utils.dates import parse_iso_datetime

event_bp = Blueprint("event", __name__)


@event_bp.route("", methods=["GET"])
def get_events():
    data = EventService.get_events(
        category=request.args.get("category"),
        search=request.args.get("search"),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    return jsonify({"success": True, "data": data})


@event_bp.route("/active-count", methods=["GET"])
@jwt_required()
def get_active_event_count():
    count = AnalyticsService.get_active_event_count(get_current_user())
    return jsonify({"success": True, "data": {"active_event_count": count}})


@event_bp.route("/organizer/analytics", methods=["GET"])
@jwt_required()
def get_organizer_analytics():
    data = AnalyticsService.get_organizer_analytics(get_current_user())
    return jsonify({"success": True, "data": data})


@event_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id):
    # Anonymous callers only see approved events
    user = get_current_user(optional=True)
    event = EventService.get_event(event_id, user)
    return jsonify({"success": True, "data": {"event": event}})


@event_bp.route("/<int:event_id>", methods=["DELETE"])
@jwt_required()
def delete_event(event_id):
    EventService.delete_event(event_id, get_current_user())
    return jsonify({"success": True, "message": "Event deleted successfully"})


@event_bp.route("/<int:event_id>/close-registration", methods=["PATCH"])
@jwt_required()
def close_registration(event_id):
    event = EventService.close_registration(event_id, get_current_user())
    return jsonify(
        {
            "success": True,
            "message": "Event registration closed successfully",
            "data": {"event": event.to_dict()},
        }
    )


@event_bp.route("/<int:event_id>/open-registration", methods=["PATCH"])
@jwt_required()
def open_registration(event_id):
    event = EventService.open_registration(event_id, get_current_user())
    return jsonify(
        {
            "success": True,
            "message": "Event registration opened successfully",
            "data": {"event": event.to_dict()},
        }
    )


@event_bp.route("/<int:event_id>/register", methods=["POST"])
@jwt_required()
def register_for_event(event_id):
    data = request.get_json(silent=True) or {}
    registration = RegistrationService.register_for_event(
        event_id, get_current_user(), source=data.get("source")
    )
    return (
        jsonify(
            {
                "success": True,
                "message": "Successfully registered for event",
                "data": {"registration": registration.to_dict()},
            }
        ),
        201,
    )


@event_bp.route("/<int:event_id>/register", methods=["DELETE"])
@jwt_required()
def unregister_from_event(event_id):
    RegistrationService.unregister_from_event(event_id, get_current_user())
    return jsonify({"success": True, "message": "Successfully unregistered from event"})


@event_bp.route("/<int:event_id>/check-in", methods=["POST"])
@jwt_required()
def check_in(event_id):
    data = request.get_json(silent=True) or {}
    if not data.get("user_id"):
        raise MissingFieldsError(["user_id"])
    try:
        user_id = int(data["user_id"])
    except (TypeError, ValueError):
        raise ValidationError("user_id must be an integer")

    check_in_time = None
    if data.get("check_in_time"):
        try:
            check_in_time = parse_iso_datetime(data["check_in_time"])
        except ValueError:
            raise ValidationError("Invalid date format for check_in_time")

    attendance = AttendanceService.check_in(
        event_id, user_id, get_current_user(), check_in_time=check_in_time
    )
    return (
        jsonify(
            {
                "success": True,
                "message": "Attendee checked in",
                "data": {"attendance": attendance.to_dict()},
            }
        ),
        201,
    )


@event_bp.route("/<int:event_id>/attendance", methods=["GET"])
@jwt_required()
def get_attendance_list(event_id):
    data = RegistrationService.get_attendance_list(event_id, get_current_user())
    return jsonify({"success": True, "data": data})


@event_bp.route("/<int:event_id>/attendance/<int:registration_id>", methods=["PUT"])
@jwt_required()
def mark_attended(event_id, registration_id):
    registration = RegistrationService.mark_attended(
        event_id, registration_id, get_current_user()
    )
    return jsonify(
        {
            "success": True,
            "message": "Attendance marked",
            "data": {"registration": registration.to_dict()},
        }
    )
