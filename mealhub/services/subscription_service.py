import logging
from datetime import date

from dateutil.relativedelta import relativedelta
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from mealhub.extensions import db
from mealhub.models.assignment import Assignment
from mealhub.models.order import Order
from mealhub.services.subscription_order_service import (
    generate_subscription_orders,
    load_subscription,
)
from mealhub.utils.exceptions import (
    InvalidArgument,
    InvalidAssignment,
    NotPaused,
    PersistenceFailed,
    PreferencesRejected,
    ServiceError,
)
from mealhub.utils.pagination import paginate_query
from mealhub.utils.result import Ok, Err

logger = logging.getLogger(__name__)

# orders a pause may cancel; anything further along is already being fulfilled
PAUSE_CANCELLABLE_STATUSES = ("new", "confirmed")
UPCOMING_STATUSES = ("new", "confirmed")
UPCOMING_LIMIT = 5
PREFERENCE_FIELDS = ("cuisines", "dietaryRestrictions", "allergies")


def pause_subscription(assignment_id, reason):
    try:
        assignment = load_subscription(assignment_id)
        if assignment.status != "active":
            raise InvalidAssignment(
                "Only active subscriptions can be paused",
                details={"assignmentId": assignment.id, "status": assignment.status},
                status=409,
            )

        assignment.status = "suspended"
        assignment.append_note(f"Paused: {reason}")

        cancelled = (
            Order.query
            .filter(
                Order.assignment_id == assignment.id,
                Order.status.in_(PAUSE_CANCELLABLE_STATUSES),
            )
            .update(
                {
                    Order.status: "cancelled",
                    Order.cancel_reason: f"Subscription paused: {reason}",
                    Order.cancelled_by: "admin",
                },
                synchronize_session=False,
            )
        )
        db.session.commit()
    except ServiceError as e:
        db.session.rollback()
        return Err(e)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error updating subscription %s", assignment_id)
        return Err(PersistenceFailed("Could not save subscription changes", details={"error": str(e)}))

    logger.info("Paused subscription %s, cancelled %s pending orders", assignment_id, cancelled)
    return Ok({"ordersCancelled": cancelled})


def resume_subscription(assignment_id, today=None):
    try:
        assignment = load_subscription(assignment_id)
        if assignment.status != "suspended":
            raise NotPaused(
                "Assignment is not paused",
                details={"assignmentId": assignment.id, "status": assignment.status},
            )

        assignment.status = "active"
        assignment.append_note("Resumed")
        db.session.commit()
    except ServiceError as e:
        db.session.rollback()
        return Err(e)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error updating subscription %s", assignment_id)
        return Err(PersistenceFailed("Could not save subscription changes", details={"error": str(e)}))

    start = today or date.today()
    end = start + relativedelta(months=current_app.config.get("SUBSCRIPTION_RESUME_MONTHS", 1))

    result = generate_subscription_orders(assignment_id, start, end)
    if result.ok:
        generated = result.value.orders_created
    else:
        # the subscription is active again even when nothing could be scheduled
        logger.warning(
            "Resumed subscription %s without new orders: %s", assignment_id, result.error.message
        )
        generated = 0

    return Ok({"ordersGenerated": generated})


def get_subscription_status(assignment_id):
    try:
        assignment = load_subscription(assignment_id)
    except ServiceError as e:
        return Err(e)

    rows = (
        db.session.query(Order.status, func.count(Order.id))
        .filter(Order.assignment_id == assignment.id)
        .group_by(Order.status)
        .order_by(Order.status)
        .all()
    )
    order_stats = [{"status": status, "count": count} for status, count in rows]

    upcoming = (
        Order.query
        .filter(
            Order.assignment_id == assignment.id,
            Order.status.in_(UPCOMING_STATUSES),
            Order.scheduled_date >= date.today(),
        )
        .order_by(Order.scheduled_date.asc())
        .limit(UPCOMING_LIMIT)
        .all()
    )

    return Ok({
        "assignment": assignment,
        "orderStats": order_stats,
        "upcomingOrders": upcoming,
        "totalOrders": sum(s["count"] for s in order_stats),
    })


def _clean_preference_list(name, value):
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidArgument(f"{name} must be a list of strings", details={"field": name})
    return [v.strip() for v in value if v.strip()]


def update_subscription_preferences(assignment_id, preferences):
    try:
        if not isinstance(preferences, dict):
            raise InvalidArgument("preferences must be an object")

        assignment = load_subscription(assignment_id)
        if assignment.status != "active":
            raise PreferencesRejected(
                "Cannot update preferences for inactive subscription",
                details={"status": assignment.status},
            )

        current = assignment.meal_preferences or {}
        merged = {}
        for name in PREFERENCE_FIELDS:
            value = preferences.get(name)
            if value is None:
                merged[name] = list(current.get(name) or [])
            else:
                merged[name] = _clean_preference_list(name, value)

        # JSON columns only notice reassignment
        assignment.meal_preferences = merged
        db.session.commit()
    except ServiceError as e:
        db.session.rollback()
        return Err(e)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error updating subscription %s", assignment_id)
        return Err(PersistenceFailed("Could not save subscription changes", details={"error": str(e)}))

    return Ok(merged)


def list_user_subscriptions(user_id, page=1, limit=10):
    q = (
        Assignment.query
        .filter_by(user_id=user_id, assignment_type="subscription")
        .order_by(Assignment.created_at.desc())
    )
    return paginate_query(q, page, limit)
