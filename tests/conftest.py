"""Shared fixtures: an app on in-memory SQLite plus a small cast of records."""

from datetime import date

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mealhub.extensions import db
from mealhub.main import create_app
from mealhub.models.assignment import Assignment
from mealhub.models.chef import Chef
from mealhub.models.order import Order
from mealhub.models.user import User
from mealhub.utils.auth_utils import hash_password


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(email, first_name, role="user", **kwargs):
    user = User(
        email=email,
        password_hash=hash_password("correct-horse"),
        first_name=first_name,
        role=role,
        **kwargs,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def user(app):
    return _user(
        "asha@example.com",
        "Asha",
        last_name="Rao",
        household_size=3,
        address={"street": "12 Lake Rd", "city": "Pune", "state": "MH", "pincode": "411001"},
    )


@pytest.fixture
def other_user(app):
    return _user("ben@example.com", "Ben")


@pytest.fixture
def admin(app):
    return _user("admin@example.com", "Ada", role="admin")


@pytest.fixture
def chef(app):
    chef = Chef(
        first_name="Marco",
        last_name="Bianchi",
        email="marco@example.com",
        phone="+15550100",
        cuisine_specialty=["Italian"],
    )
    db.session.add(chef)
    db.session.commit()
    return chef


@pytest.fixture
def make_subscription(user, chef):
    def make(**overrides):
        fields = {
            "user_id": user.id,
            "chef_id": chef.id,
            "assignment_type": "subscription",
            "status": "active",
            "plan_type": "weekly",
            "meals_per_week": 3,
            "delivery_days": ["monday", "wednesday", "friday"],
            "meal_preferences": {
                "cuisines": ["Italian"],
                "dietaryRestrictions": ["vegetarian"],
                "allergies": [],
            },
        }
        fields.update(overrides)
        assignment = Assignment(**fields)
        db.session.add(assignment)
        db.session.commit()
        return assignment
    return make


@pytest.fixture
def subscription(make_subscription):
    return make_subscription()


@pytest.fixture
def make_order():
    def make(assignment, scheduled_date, status="confirmed"):
        order = Order(
            user_id=assignment.user_id,
            chef_id=assignment.chef_id,
            assignment_id=assignment.id,
            food_name="Subscription Meal",
            scheduled_date=scheduled_date,
            status=status,
            order_type="subscription",
            is_subscription_order=True,
            subscription_id=assignment.id,
        )
        db.session.add(order)
        db.session.commit()
        return order
    return make


@pytest.fixture
def break_commits(monkeypatch):
    """Call to make every later session commit fail as if the database went away."""
    def apply():
        def commit(self):
            raise OperationalError("COMMIT", {}, Exception("database is locked"))
        monkeypatch.setattr(Session, "commit", commit)
    return apply


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}


def orders_for(assignment_id):
    return (
        Order.query
        .filter_by(assignment_id=assignment_id)
        .order_by(Order.scheduled_date)
        .all()
    )


JAN_1_2024 = date(2024, 1, 1)  # a Monday
JAN_7_2024 = date(2024, 1, 7)  # a Sunday
