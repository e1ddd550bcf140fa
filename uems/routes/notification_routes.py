from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from uems.services.notification_service import NotificationService
from uems.utils.auth import get_current_user

notification_bp = Blueprint("notification", __name__)


@notification_bp.route("", methods=["GET"])
@jwt_required()
def get_notifications():
    user = get_current_user()
    unread_only = request.args.get("unreadOnly", "false").lower() == "true"
    data = NotificationService.get_notifications(
        user,
        unread_only=unread_only,
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 20, type=int),
    )
    return jsonify({"success": True, "data": data})


@notification_bp.route("/unread-count", methods=["GET"])
@jwt_required()
def get_unread_count():
    user = get_current_user()
    return jsonify(
        {"success": True, "data": {"unread_count": NotificationService.unread_count(user)}}
    )


@notification_bp.route("/<int:notification_id>/read", methods=["PUT"])
@jwt_required()
def mark_as_read(notification_id):
    user = get_current_user()
    notification = NotificationService.mark_as_read(notification_id, user)
    return jsonify(
        {
            "success": True,
            "message": "Notification marked as read",
            "data": {"notification": notification.to_dict()},
        }
    )


@notification_bp.route("/read-all", methods=["PUT"])
@jwt_required()
def mark_all_as_read():
    user = get_current_user()
    updated = NotificationService.mark_all_as_read(user)
    return jsonify(
        {
            "success": True,
            "message": "All notifications marked as read",
            "data": {"updated": updated},
        }
    )


@notification_bp.route("/<int:notification_id>", methods=["DELETE"])
@jwt_required()
def delete_notification(notification_id):
    user = get_current_user()
    NotificationService.delete_notification(notification_id, user)
    return jsonify({"success": True, "message": "Notification deleted"})


@notification_bp.route("", methods=["DELETE"])
@jwt_required()
def clear_all():
    user = get_current_user()
    deleted = NotificationService.clear_all(user)
    return jsonify(
        {"success": True, "message": "All notifications cleared", "data": {"deleted": deleted}}
    )
