from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from mealhub.extensions import db, limiter
from mealhub.models.assignment import Assignment
from mealhub.schemas.assignment_schema import assignment_schema, assignments_schema
from mealhub.schemas.order_schema import orders_schema, candidate_schema
from mealhub.schemas.subscription_schema import (
    generate_orders_schema,
    pause_subscription_schema,
    update_preferences_schema,
)
from mealhub.services.notification_service import send_notification_to_user
from mealhub.services.subscription_order_service import generate_subscription_orders
from mealhub.services.subscription_service import (
    pause_subscription,
    resume_subscription,
    get_subscription_status,
    update_subscription_preferences,
    list_user_subscriptions,
)
from mealhub.utils.auth_utils import admin_required, current_user
from mealhub.utils.response_formatter import (
    success_response,
    error_response,
    service_error_response,
)

bp = Blueprint("subscriptions", __name__, url_prefix="/api/v1/subscriptions")


def validation_error(err):
    return error_response("VALIDATION_ERROR", "Invalid request", err.messages, status=422)


def forbidden_unless_owner(user, assignment_id):
    """Return an error response when ``user`` may not see this subscription."""
    if not user:
        return error_response("NOT_FOUND", "User not found", status=404)
    if user.role == "admin":
        return None
    assignment = db.session.get(Assignment, assignment_id)
    if assignment and assignment.user_id != user.id:
        return error_response("FORBIDDEN", "You do not own this subscription", status=403)
    return None


def notify_subscriber(assignment_id, title, message, notif_type, details=None):
    assignment = db.session.get(Assignment, assignment_id)
    if not assignment:
        return
    admin = current_user()
    send_notification_to_user(
        user_id=assignment.user_id,
        title=title,
        message=message,
        notif_type=notif_type,
        details={"assignment_id": assignment.id, **(details or {})},
        sender_id=admin.id if admin else None,
    )


# ------------------------------------------------------------
#  GET /subscriptions: the caller's subscription assignments
# ------------------------------------------------------------
@bp.route("", methods=["GET"])
@jwt_required()
def list_subscriptions():
    user = current_user()
    if not user:
        return error_response("NOT_FOUND", "User not found", status=404)

    page = request.args.get("page", 1, type=int)
    limit = request.args.get("limit", 10, type=int)
    items, pagination = list_user_subscriptions(user.id, page, limit)

    return success_response({
        "subscriptions": assignments_schema.dump(items),
        "pagination": pagination,
    })


# ------------------------------------------------------------
#  POST /subscriptions/generate-orders: expand a subscription into orders
# ------------------------------------------------------------
@bp.route("/generate-orders", methods=["POST"])
@limiter.limit("30 per minute")
@admin_required
def create_subscription_orders():
    try:
        data = generate_orders_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return validation_error(err)

    result = generate_subscription_orders(data["assignmentId"], data["startDate"], data["endDate"])
    if not result.ok:
        return service_error_response(result.error)

    summary = result.value
    return success_response(
        {
            "ordersCreated": summary.orders_created,
            "orders": orders_schema.dump(summary.orders),
            "errors": [
                {"order": candidate_schema.dump(e["order"]), "error": e["error"]}
                for e in summary.errors
            ],
        },
        message="Subscription orders generated successfully",
        status=201,
    )


# ------------------------------------------------------------
#  PATCH /subscriptions/<id>/pause: suspend and cancel pending orders
# ------------------------------------------------------------
@bp.route("/<assignment_id>/pause", methods=["PATCH"])
@admin_required
def pause_user_subscription(assignment_id):
    try:
        data = pause_subscription_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return validation_error(err)

    result = pause_subscription(assignment_id, data["reason"])
    if not result.ok:
        return service_error_response(result.error)

    notify_subscriber(
        assignment_id,
        title="Subscription paused",
        message=f"Your meal subscription has been paused. Reason: {data['reason']}",
        notif_type="subscription_paused",
        details={"reason": data["reason"]},
    )

    return success_response(
        {"ordersCancelled": result.value["ordersCancelled"]},
        message="Subscription paused successfully",
    )


# ------------------------------------------------------------
#  PATCH /subscriptions/<id>/resume: reactivate and schedule the next month
# ------------------------------------------------------------
@bp.route("/<assignment_id>/resume", methods=["PATCH"])
@admin_required
def resume_user_subscription(assignment_id):
    result = resume_subscription(assignment_id)
    if not result.ok:
        return service_error_response(result.error)

    generated = result.value["ordersGenerated"]
    notify_subscriber(
        assignment_id,
        title="Subscription resumed",
        message=f"Your meal subscription is active again. {generated} deliveries have been scheduled.",
        notif_type="subscription_resumed",
        details={"orders_generated": generated},
    )

    return success_response(
        {"ordersGenerated": generated},
        message="Subscription resumed successfully",
    )


# ------------------------------------------------------------
#  GET /subscriptions/<id>/status
# ------------------------------------------------------------
@bp.route("/<assignment_id>/status", methods=["GET"])
@jwt_required()
def get_user_subscription_status(assignment_id):
    denied = forbidden_unless_owner(current_user(), assignment_id)
    if denied:
        return denied

    result = get_subscription_status(assignment_id)
    if not result.ok:
        return service_error_response(result.error)

    status = result.value
    return success_response({
        "subscription": assignment_schema.dump(status["assignment"]),
        "orderStats": status["orderStats"],
        "upcomingOrders": orders_schema.dump(status["upcomingOrders"]),
        "totalOrders": status["totalOrders"],
    })


# ------------------------------------------------------------
#  PATCH /subscriptions/<id>/preferences
# ------------------------------------------------------------
@bp.route("/<assignment_id>/preferences", methods=["PATCH"])
@jwt_required()
def update_user_subscription_preferences(assignment_id):
    denied = forbidden_unless_owner(current_user(), assignment_id)
    if denied:
        return denied

    try:
        data = update_preferences_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return validation_error(err)

    result = update_subscription_preferences(assignment_id, data["preferences"])
    if not result.ok:
        return service_error_response(result.error)

    current_app.logger.info("Updated meal preferences for subscription %s", assignment_id)
    return success_response(
        {"preferences": result.value},
        message="Subscription preferences updated successfully",
    )
