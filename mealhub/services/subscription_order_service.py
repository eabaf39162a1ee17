import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from mealhub.extensions import db
from mealhub.models.assignment import Assignment
from mealhub.models.order import Order
from mealhub.models.user import EMPTY_ADDRESS
from mealhub.services.delivery_schedule import (
    DEFAULT_DELIVERY_DAYS,
    next_delivery_date,
    parse_calendar_date,
)
from mealhub.utils.exceptions import (
    InvalidArgument,
    InvalidAssignment,
    MissingSubscriptionDetails,
    NoOrdersGenerated,
    OrderCreationFailed,
    ServiceError,
)
from mealhub.utils.result import Ok, Err

logger = logging.getLogger(__name__)

SUBSCRIPTION_SCHEDULED_TIME = "12:00"


class FlatRatePricing:
    """Credits the same amount for every generated order.

    Subscription orders are stored with a zero price, so the assignment's
    running ``total_amount`` is approximated from the order count.
    """

    def __init__(self, unit_price):
        self.unit_price = float(unit_price)

    def __call__(self, orders):
        return round(len(orders) * self.unit_price, 2)


def default_pricing():
    return FlatRatePricing(current_app.config.get("SUBSCRIPTION_UNIT_PRICE", 50))


@dataclass
class GenerationSummary:
    orders: list
    errors: list = field(default_factory=list)

    @property
    def orders_created(self):
        return len(self.orders)


def load_subscription(assignment_id):
    if not assignment_id:
        raise InvalidAssignment("Assignment ID is required")

    assignment = db.session.get(Assignment, assignment_id)
    if not assignment:
        raise InvalidAssignment("Assignment not found", details={"assignmentId": assignment_id}, status=404)
    if not assignment.is_subscription:
        raise InvalidAssignment(
            "Invalid assignment type for subscription orders",
            details={"assignmentId": assignment_id, "assignmentType": assignment.assignment_type},
        )
    return assignment


def require_subscription_details(assignment):
    missing = []
    if not assignment.plan_type:
        missing.append("planType")
    if not assignment.meals_per_week:
        missing.append("mealsPerWeek")
    if assignment.delivery_days is None:
        missing.append("deliveryDays")
    if missing:
        raise MissingSubscriptionDetails("Incomplete subscription details", details={"missing": missing})


def resolve_delivery_days(assignment):
    return list(assignment.delivery_days or DEFAULT_DELIVERY_DAYS)


def build_order_candidates(assignment, start, end):
    """Expand the weekly delivery rule into dated order rows within ``[start, end]``."""
    user = assignment.user
    address = dict(user.address) if user and user.address else dict(EMPTY_ADDRESS)
    delivery_days = resolve_delivery_days(assignment)

    candidates = []
    week_start = start
    week_number = 1

    while week_start <= end:
        for delivery_day in delivery_days[:assignment.meals_per_week]:
            try:
                delivery_date = next_delivery_date(week_start, delivery_day)
            except InvalidArgument as e:
                logger.error(
                    "Skipping delivery day %r for week %s of assignment %s: %s",
                    delivery_day, week_number, assignment.id, e.message,
                )
                continue

            if delivery_date > end:
                continue

            candidates.append({
                "user_id": assignment.user_id,
                "chef_id": assignment.chef_id,
                "assignment_id": assignment.id,
                "food_name": f"Subscription Meal - Week {week_number}",
                "description": f"Weekly subscription meal for {user.first_name if user else 'subscriber'}",
                "quantity": 1,
                "number_of_persons": (user.household_size if user else None) or 1,
                "scheduled_date": delivery_date,
                "scheduled_time": SUBSCRIPTION_SCHEDULED_TIME,
                "special_instructions": "Subscription meal - please follow dietary preferences",
                "delivery_address": address,
                "estimated_price": 0,
                "order_type": "subscription",
                "status": "confirmed",
                "is_subscription_order": True,
                "subscription_id": assignment.id,
                "delivery_day": delivery_day.strip().lower(),
                "week_number": week_number,
            })

        # stop before stepping past end, date.max + 7 days overflows
        if (end - week_start).days < 7:
            break
        week_start += timedelta(days=7)
        week_number += 1

    return candidates


def describe_candidate(candidate):
    return {
        "scheduledDate": candidate["scheduled_date"].isoformat(),
        "deliveryDay": candidate["delivery_day"],
        "weekNumber": candidate["week_number"],
        "foodName": candidate["food_name"],
    }


def save_order(candidate):
    order = Order(**candidate)
    db.session.add(order)
    db.session.flush()
    return order


def persist_candidates(candidates):
    """Write candidates one savepoint at a time; a failed row does not stop the rest."""
    created, errors = [], []
    for candidate in candidates:
        try:
            with db.session.begin_nested():
                order = save_order(candidate)
        except Exception as e:
            logger.warning(
                "Could not create subscription order for %s (week %s): %s",
                candidate["scheduled_date"], candidate["week_number"], e,
            )
            errors.append({"order": candidate, "error": str(e)})
            continue
        created.append(order)
    return created, errors


def record_order_stats(assignment_id, orders, pricing):
    # increments happen in SQL (total = total + n), never read-modify-write
    amount = pricing(orders)
    try:
        Assignment.query.filter_by(id=assignment_id).update(
            {
                Assignment.total_orders: Assignment.total_orders + len(orders),
                Assignment.total_amount: Assignment.total_amount + amount,
                Assignment.last_order_date: datetime.now(timezone.utc),
            },
            synchronize_session=False,
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating order stats for assignment %s", assignment_id)
        return False
    return True


def generate_subscription_orders(assignment_id, start_date, end_date, pricing=None):
    """Create the confirmed orders a subscription owes between two dates.

    Returns ``Ok(GenerationSummary)`` when at least one order was written
    (per-row failures are reported in ``summary.errors``), otherwise
    ``Err`` carrying one of the service errors. Validation failures are
    reported before anything is written.
    """
    try:
        if not assignment_id or not start_date or not end_date:
            raise InvalidArgument("Assignment ID, start date, and end date are required")

        start = parse_calendar_date(start_date, "startDate")
        end = parse_calendar_date(end_date, "endDate")
        if end < start:
            raise InvalidArgument(
                "endDate must be on or after startDate",
                details={"startDate": start.isoformat(), "endDate": end.isoformat()},
            )
        max_days = current_app.config.get("SUBSCRIPTION_MAX_GENERATION_DAYS", 92)
        if (end - start).days > max_days:
            raise InvalidArgument(
                f"Date range may span at most {max_days} days",
                details={"startDate": start.isoformat(), "endDate": end.isoformat(), "maxDays": max_days},
            )

        assignment = load_subscription(assignment_id)
        require_subscription_details(assignment)

        candidates = build_order_candidates(assignment, start, end)
        if not candidates:
            raise NoOrdersGenerated(
                "No orders could be generated for the given date range",
                details={"startDate": start.isoformat(), "endDate": end.isoformat()},
            )

        created, errors = persist_candidates(candidates)
        if not created:
            db.session.rollback()
            raise OrderCreationFailed(
                "Failed to create any orders",
                details={"errors": [
                    {"order": describe_candidate(e["order"]), "error": e["error"]} for e in errors
                ]},
            )

        db.session.commit()
    except ServiceError as e:
        db.session.rollback()
        logger.warning("Subscription order generation for %s failed: %s", assignment_id, e.message)
        return Err(e)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error generating subscription orders for %s", assignment_id)
        return Err(OrderCreationFailed(
            "Failed to save generated orders", details={"error": str(e)}
        ))

    # orders stay committed even if the totals update fails
    record_order_stats(assignment.id, created, pricing or default_pricing())

    logger.info(
        "Generated %s subscription orders for assignment %s (%s failed)",
        len(created), assignment.id, len(errors),
    )
    return Ok(GenerationSummary(orders=created, errors=errors))
