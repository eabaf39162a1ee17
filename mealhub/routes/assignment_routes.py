from flask import Blueprint, request
from marshmallow import ValidationError
from mealhub.schemas.assignment_schema import (
    assignment_schema,
    assignments_schema,
    create_assignment_schema,
)
from mealhub.services.assignment_service import create_assignment, list_assignments
from mealhub.services.notification_service import send_notification_to_user
from mealhub.utils.auth_utils import admin_required, current_user
from mealhub.utils.response_formatter import (
    success_response,
    error_response,
    service_error_response,
)

bp = Blueprint("assignments", __name__, url_prefix="/api/v1/assignments")


# ---- Assign a chef to a user ----
@bp.route("", methods=["POST"])
@admin_required
def create_new_assignment():
    try:
        data = create_assignment_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("VALIDATION_ERROR", "Invalid request", err.messages, status=422)

    admin = current_user()
    result = create_assignment(admin, data)
    if not result.ok:
        return service_error_response(result.error)

    assignment = result.value
    send_notification_to_user(
        user_id=assignment.user_id,
        title="Chef assigned",
        message=f"{assignment.chef.full_name} is now your chef.",
        notif_type="assignment_created",
        details={"assignment_id": assignment.id, "assignment_type": assignment.assignment_type},
        sender_id=admin.id,
    )

    return success_response(
        {"assignment": assignment_schema.dump(assignment)},
        message="Assignment created successfully",
        status=201,
    )


# ---- List assignments ----
@bp.route("", methods=["GET"])
@admin_required
def get_assignments():
    page = request.args.get("page", 1, type=int)
    limit = request.args.get("limit", 10, type=int)
    items, pagination = list_assignments(
        status=request.args.get("status"),
        assignment_type=request.args.get("type"),
        page=page,
        limit=limit,
    )
    return success_response({
        "assignments": assignments_schema.dump(items),
        "pagination": pagination,
    })
