from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from uems.services.user_service import UserService
from uems.utils.auth import get_current_user

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    user_data = request.get_json(silent=True) or {}
    result = UserService.sign_up(user_data)
    return (
        jsonify(
            {
                "success": True,
                "message": "User registered successfully",
                "data": result,
            }
        ),
        201,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    user_data = request.get_json(silent=True) or {}
    result = UserService.sign_in(user_data.get("student_id"), user_data.get("password"))
    return jsonify({"success": True, "message": "Login successful", "data": result}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = get_current_user()
    return jsonify({"success": True, "data": {"user": user.to_dict()}}), 200
