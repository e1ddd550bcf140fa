from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from uems.services.admin_service import AdminService
from uems.services.analytics_service import AnalyticsService
from uems.utils.auth import admin_required, get_current_user

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/pending-events", methods=["GET"])
@jwt_required()
@admin_required
def get_pending_events():
    data = AdminService.get_pending_events(
        get_current_user(),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    return jsonify({"success": True, "data": data})


@admin_bp.route("/events/<int:event_id>/approve", methods=["PUT"])
@jwt_required()
@admin_required
def approve_event(event_id):
    event = AdminService.approve_event(event_id, get_current_user())
    return jsonify(
        {
            "success": True,
            "message": "Event approved successfully",
            "data": {"event": event.to_dict()},
        }
    )


@admin_bp.route("/events/<int:event_id>/reject", methods=["PUT"])
@jwt_required()
@admin_required
def reject_event(event_id):
    data = request.get_json(silent=True) or {}
    notes = data.get("rejection_notes", data.get("approval_notes"))
    event = AdminService.reject_event(event_id, get_current_user(), notes)
    return jsonify(
        {
            "success": True,
            "message": "Event rejected",
            "data": {"event": event.to_dict()},
        }
    )


@admin_bp.route("/statistics", methods=["GET"])
@jwt_required()
@admin_required
def get_statistics():
    data = AdminService.get_statistics(get_current_user())
    return jsonify({"success": True, "data": data})


@admin_bp.route("/organizer-analytics/<int:organizer_id>", methods=["GET"])
@jwt_required()
def get_organizer_analytics(organizer_id):
    # Organizers may read their own figures, so no admin_required here
    data = AnalyticsService.get_organizer_analytics_for(organizer_id, get_current_user())
    return jsonify({"success": True, "data": data})


@admin_bp.route("/analytics/comprehensive", methods=["GET"])
@jwt_required()
@admin_required
def get_comprehensive_analytics():
    data = AnalyticsService.get_comprehensive_analytics(get_current_user())
    return jsonify({"success": True, "data": data})
