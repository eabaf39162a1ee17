from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from mealhub.extensions import db
from mealhub.models.notification import Notification
from mealhub.services.notification_service import (
    get_user_notifications,
    mark_notification_read,
    mark_all_read_for_user,
)
from mealhub.utils.response_formatter import success_response, error_response
from mealhub.utils.pagination import paginate_query

bp = Blueprint("notifications", __name__, url_prefix="/api/v1/notifications")


def serialize_notification(n):
    return {
        "id": n.id,
        "type": n.type,
        "title": n.title,
        "message": n.message,
        "details": n.details or {},
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


@bp.route("", methods=["GET"])
@jwt_required()
def get_notifications():
    uid = get_jwt_identity()
    is_read = request.args.get("is_read")
    if is_read is not None:
        is_read = is_read.lower() in ("1", "true", "yes")

    page = request.args.get("page", 1, type=int)
    limit = request.args.get("limit", 20, type=int)
    items, pagination = paginate_query(get_user_notifications(uid, is_read), page, limit)

    return success_response({
        "notifications": [serialize_notification(n) for n in items],
        "pagination": pagination,
    })


@bp.route("/<notif_id>/read", methods=["PATCH"])
@jwt_required()
def read_notification(notif_id):
    uid = get_jwt_identity()
    notif = db.session.get(Notification, notif_id)
    if not notif or notif.user_id != uid:
        return error_response("NOT_FOUND", "Notification not found", status=404)

    mark_notification_read(notif)
    return success_response({"id": notif.id, "is_read": True})


@bp.route("/read-all", methods=["PATCH"])
@jwt_required()
def read_all_notifications():
    updated = mark_all_read_for_user(get_jwt_identity())
    return success_response({"updated": updated})
