import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from mealhub.extensions import db
from mealhub.models.assignment import Assignment, WEEKDAYS
from mealhub.models.chef import Chef
from mealhub.models.user import User
from mealhub.utils.exceptions import InvalidArgument, PersistenceFailed, ServiceError
from mealhub.utils.pagination import paginate_query
from mealhub.utils.result import Ok, Err

logger = logging.getLogger(__name__)


def validate_assignment_constraints(user, chef, assignment_type, subscription):
    errors = []

    if not user:
        errors.append("User not found")
    elif user.account_status != "active":
        errors.append("User account is not active")

    if not chef:
        errors.append("Chef not found")
    elif chef.account_status != "active":
        errors.append("Chef account is not active")
    elif not chef.is_available:
        errors.append("Chef is not available for new assignments")

    if user and chef:
        existing = Assignment.query.filter(
            Assignment.user_id == user.id,
            Assignment.chef_id == chef.id,
            Assignment.status.in_(("active", "suspended")),
        ).first()
        if existing:
            errors.append("An active assignment already exists between this user and chef")

    if user:
        user_limit = current_app.config["MAX_ACTIVE_ASSIGNMENTS_PER_USER"]
        if Assignment.query.filter_by(user_id=user.id, status="active").count() >= user_limit:
            errors.append(f"User already has maximum number of active assignments ({user_limit})")

    if chef:
        chef_limit = current_app.config["MAX_ACTIVE_ASSIGNMENTS_PER_CHEF"]
        if Assignment.query.filter_by(chef_id=chef.id, status="active").count() >= chef_limit:
            errors.append(f"Chef already has maximum number of active assignments ({chef_limit})")

    if assignment_type == "subscription":
        if not subscription:
            errors.append("Subscription details are required for subscription assignments")
        else:
            meals = subscription.get("mealsPerWeek")
            days = subscription.get("deliveryDays") or []
            if not subscription.get("planType"):
                errors.append("Plan type is required for subscription assignments")
            if meals is not None and not 1 <= meals <= 21:
                errors.append("Meals per week must be between 1 and 21")
            if len(days) > 7 or len(set(days)) != len(days):
                errors.append("Delivery days must be at most 7 distinct weekdays")
            invalid = [d for d in days if d not in WEEKDAYS]
            if invalid:
                errors.append(f"Invalid delivery days: {', '.join(invalid)}")

    return errors


def create_assignment(admin, data):
    """Pair a user with a chef. ``data`` is the loaded CreateAssignmentSchema payload."""
    assignment_type = data.get("assignmentType", "individual")
    subscription = data.get("subscriptionDetails") if assignment_type == "subscription" else None

    try:
        user = db.session.get(User, data["userId"])
        chef = db.session.get(Chef, data["chefId"])

        errors = validate_assignment_constraints(user, chef, assignment_type, subscription)
        if errors:
            raise InvalidArgument("Assignment validation failed", details={"errors": errors})

        assignment = Assignment(
            user_id=user.id,
            chef_id=chef.id,
            assigned_by=admin.id,
            assignment_type=assignment_type,
            notes=data.get("notes"),
            end_date=data.get("endDate"),
        )
        if subscription:
            prefs = subscription.get("mealPreferences") or {}
            assignment.plan_type = subscription["planType"]
            assignment.meals_per_week = subscription.get("mealsPerWeek") or 1
            assignment.delivery_days = list(subscription.get("deliveryDays") or [])
            assignment.meal_preferences = {
                "cuisines": prefs.get("cuisines", []),
                "dietaryRestrictions": prefs.get("dietaryRestrictions", []),
                "allergies": prefs.get("allergies", []),
            }

        db.session.add(assignment)
        db.session.commit()
    except ServiceError as e:
        db.session.rollback()
        return Err(e)
    except IntegrityError:
        # a concurrent request created the same live pair first
        db.session.rollback()
        return Err(InvalidArgument(
            "Assignment validation failed",
            details={"errors": ["An active assignment already exists between this user and chef"]},
        ))
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error creating assignment for user %s", data.get("userId"))
        return Err(PersistenceFailed("Could not save assignment", details={"error": str(e)}))

    logger.info("Admin %s assigned chef %s to user %s (%s)", admin.id, chef.id, user.id, assignment_type)
    return Ok(assignment)


def list_assignments(status=None, assignment_type=None, page=1, limit=10):
    q = Assignment.query
    if status:
        q = q.filter_by(status=status)
    if assignment_type:
        q = q.filter_by(assignment_type=assignment_type)
    return paginate_query(q.order_by(Assignment.created_at.desc()), page, limit)
