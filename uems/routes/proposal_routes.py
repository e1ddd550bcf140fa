from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from uems.services.proposal_service import ProposalService
from uems.utils.auth import get_current_user

proposal_bp = Blueprint("proposal", __name__)


@proposal_bp.route("", methods=["POST"])
@jwt_required()
def create_proposal():
    user = get_current_user()
    event = ProposalService.create_proposal(request.get_json(silent=True) or {}, user)
    return (
        jsonify(
            {
                "success": True,
                "message": "Event proposal created successfully",
                "data": {"event": event.to_dict()},
            }
        ),
        201,
    )


@proposal_bp.route("/<int:event_id>/submit", methods=["POST"])
@jwt_required()
def submit_proposal(event_id):
    user = get_current_user()
    event = ProposalService.submit_proposal(event_id, user)
    return jsonify(
        {
            "success": True,
            "message": "Event proposal submitted for approval",
            "data": {"event": event.to_dict()},
        }
    )


@proposal_bp.route("/<int:event_id>/cancel-submission", methods=["PUT"])
@jwt_required()
def cancel_submission(event_id):
    user = get_current_user()
    event = ProposalService.cancel_submission(event_id, user)
    return jsonify(
        {
            "success": True,
            "message": "Event submission cancelled",
            "data": {"event": event.to_dict()},
        }
    )


@proposal_bp.route("/<int:event_id>", methods=["PUT"])
@jwt_required()
def update_proposal(event_id):
    user = get_current_user()
    event = ProposalService.update_proposal(
        event_id, request.get_json(silent=True) or {}, user
    )
    return jsonify(
        {
            "success": True,
            "message": "Event proposal updated successfully",
            "data": {"event": event.to_dict()},
        }
    )


@proposal_bp.route("/<int:event_id>", methods=["DELETE"])
@jwt_required()
def delete_proposal(event_id):
    user = get_current_user()
    ProposalService.delete_proposal(event_id, user)
    return jsonify({"success": True, "message": "Event proposal deleted successfully"})


@proposal_bp.route("/my-events", methods=["GET"])
@jwt_required()
def get_my_proposals():
    user = get_current_user()
    data = ProposalService.get_my_proposals(
        user,
        status=request.args.get("status"),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    return jsonify({"success": True, "data": data})
