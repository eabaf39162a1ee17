"""HTTP tests for /api/v1/auth, /api/v1/assignments and /api/v1/notifications."""

import pytest

from conftest import auth_header
from mealhub.extensions import db
from mealhub.models.assignment import Assignment
from mealhub.models.notification import Notification
from mealhub.services import assignment_service


class TestAuthRoutes:
    def test_register_and_login(self, client):
        resp = client.post("/api/v1/auth/register", json={
            "first_name": "Cara",
            "email": "Cara@Example.com",
            "password": "long-enough-pw",
            "household_size": 2,
        })
        assert resp.status_code == 201
        registered = resp.get_json()["user"]
        assert registered["email"] == "cara@example.com"
        assert registered["role"] == "user"

        resp = client.post("/api/v1/auth/login", json={"email": "cara@example.com", "password": "long-enough-pw"})
        assert resp.status_code == 200
        token = resp.get_json()["access_token"]

        resp = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.get_json()["household_size"] == 2

    def test_register_duplicate_email(self, client, user):
        resp = client.post("/api/v1/auth/register", json={
            "first_name": "Asha", "email": user.email, "password": "long-enough-pw",
        })

        assert resp.status_code == 409
        assert resp.get_json()["error"]["code"] == "USER_EXISTS"

    def test_short_password(self, client):
        resp = client.post("/api/v1/auth/register", json={
            "first_name": "Dee", "email": "dee@example.com", "password": "short",
        })

        assert resp.status_code == 422

    def test_bad_credentials(self, client, user):
        resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": "wrong"})

        assert resp.status_code == 401
        assert resp.get_json()["error"]["code"] == "AUTH_FAILED"


class TestAssignmentRoutes:
    def payload(self, user, chef, **overrides):
        data = {
            "userId": user.id,
            "chefId": chef.id,
            "assignmentType": "subscription",
            "subscriptionDetails": {
                "planType": "weekly",
                "mealsPerWeek": 2,
                "deliveryDays": ["monday", "thursday"],
            },
        }
        data.update(overrides)
        return data

    def test_create_subscription(self, client, admin, user, chef):
        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(admin))

        assert resp.status_code == 201
        created = resp.get_json()["assignment"]
        assert created["assignmentType"] == "subscription"
        assert created["subscriptionDetails"]["deliveryDays"] == ["monday", "thursday"]
        assert created["subscriptionDetails"]["mealPreferences"] == {
            "cuisines": [], "dietaryRestrictions": [], "allergies": [],
        }

        assignment = db.session.get(Assignment, created["id"])
        assert assignment.assigned_by == admin.id
        assert Notification.query.filter_by(user_id=user.id, type="assignment_created").count() == 1

    def test_duplicate_live_pair(self, client, admin, user, chef, subscription):
        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(admin))

        assert resp.status_code == 400
        error = resp.get_json()["error"]
        assert error["code"] == "INVALID_ARGUMENT"
        assert "An active assignment already exists between this user and chef" in error["details"]["errors"]

    def test_unavailable_chef(self, client, admin, user, chef):
        chef.is_available = False
        db.session.commit()

        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(admin))

        assert resp.status_code == 400
        assert "Chef is not available for new assignments" in resp.get_json()["error"]["details"]["errors"]

    def test_subscription_needs_plan(self, client, admin, user, chef):
        payload = self.payload(user, chef, subscriptionDetails=None)

        resp = client.post("/api/v1/assignments", json=payload, headers=auth_header(admin))

        assert resp.status_code == 400
        assert "Subscription details are required for subscription assignments" in (
            resp.get_json()["error"]["details"]["errors"]
        )

    def test_invalid_weekday_rejected_by_schema(self, client, admin, user, chef):
        payload = self.payload(user, chef)
        payload["subscriptionDetails"]["deliveryDays"] = ["someday"]

        resp = client.post("/api/v1/assignments", json=payload, headers=auth_header(admin))

        assert resp.status_code == 422

    def test_individual_assignment(self, client, admin, user, chef):
        resp = client.post(
            "/api/v1/assignments",
            json={"userId": user.id, "chefId": chef.id},
            headers=auth_header(admin),
        )

        assert resp.status_code == 201
        assert resp.get_json()["assignment"]["subscriptionDetails"] is None

    def test_list_filters(self, client, admin, subscription, make_subscription, other_user):
        make_subscription(user_id=other_user.id, status="suspended")

        resp = client.get("/api/v1/assignments?status=suspended", headers=auth_header(admin))

        assert resp.status_code == 200
        assert len(resp.get_json()["assignments"]) == 1
        assert resp.get_json()["pagination"]["total"] == 1

    def test_live_pair_created_concurrently(self, client, admin, user, chef, subscription, monkeypatch):
        # the other request committed between our checks and our insert
        monkeypatch.setattr(assignment_service, "validate_assignment_constraints", lambda *args: [])

        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(admin))

        assert resp.status_code == 400
        assert "An active assignment already exists between this user and chef" in (
            resp.get_json()["error"]["details"]["errors"]
        )
        assert Assignment.query.filter_by(user_id=user.id, chef_id=chef.id).count() == 1

    def test_database_failure(self, client, admin, user, chef, break_commits):
        break_commits()

        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(admin))

        assert resp.status_code == 500
        assert resp.get_json()["error"]["code"] == "PERSISTENCE_FAILED"
        assert Assignment.query.count() == 0

    def test_user_cannot_create(self, client, user, chef):
        resp = client.post("/api/v1/assignments", json=self.payload(user, chef), headers=auth_header(user))

        assert resp.status_code == 403


class TestAssignmentModel:
    def test_subscription_requires_plan_type(self, user, chef):
        db.session.add(Assignment(user_id=user.id, chef_id=chef.id, assignment_type="subscription"))
        with pytest.raises(ValueError, match="plan type is required"):
            db.session.commit()
        db.session.rollback()

    def test_can_receive_orders(self, subscription, chef):
        assert subscription.can_receive_orders()
        chef.is_available = False
        assert not subscription.can_receive_orders()


class TestNotificationRoutes:
    def test_list_and_mark_read(self, client, user):
        n = Notification(user_id=user.id, title="Hello", message="Welcome")
        db.session.add(n)
        db.session.commit()
        notif_id = n.id

        resp = client.get("/api/v1/notifications", headers=auth_header(user))
        assert [x["id"] for x in resp.get_json()["notifications"]] == [notif_id]

        resp = client.patch(f"/api/v1/notifications/{notif_id}/read", headers=auth_header(user))
        assert resp.status_code == 200

        resp = client.get("/api/v1/notifications?is_read=false", headers=auth_header(user))
        assert resp.get_json()["notifications"] == []

    def test_cannot_read_others(self, client, user, other_user):
        n = Notification(user_id=user.id, title="Hello", message="Welcome")
        db.session.add(n)
        db.session.commit()

        resp = client.patch(f"/api/v1/notifications/{n.id}/read", headers=auth_header(other_user))

        assert resp.status_code == 404
