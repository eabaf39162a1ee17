from datetime import datetime, timezone
from mealhub.extensions import db
from mealhub.models.user import gen_uuid
from sqlalchemy import event, text
from sqlalchemy.sql import func

ASSIGNMENT_TYPES = ("individual", "subscription")
ASSIGNMENT_STATUSES = ("active", "inactive", "suspended", "completed")
PLAN_TYPES = ("weekly", "monthly")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

class Assignment(db.Model):
    __tablename__ = "assignments"

    __table_args__ = (
        # one live pairing per user/chef; inactive and completed ones may repeat
        db.Index(
            "uq_assignments_live_pair",
            "user_id",
            "chef_id",
            unique=True,
            postgresql_where=text("status IN ('active', 'suspended')"),
            sqlite_where=text("status IN ('active', 'suspended')"),
        ),
        db.Index("idx_assignments_chef_status", "chef_id", "status"),
        db.Index("idx_assignments_user_status", "user_id", "status"),
    )

    id = db.Column(db.String(50), primary_key=True, default=lambda: gen_uuid("asg"))

    user_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)
    chef_id = db.Column(db.String(50), db.ForeignKey("chefs.id"), nullable=False)
    assigned_by = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=True)

    assignment_type = db.Column(db.String(20), nullable=False, default="individual")
    status = db.Column(db.String(20), nullable=False, default="active")

    start_date = db.Column(db.DateTime(timezone=True), server_default=func.now())
    end_date = db.Column(db.DateTime(timezone=True), nullable=True)

    # subscription details, only populated for subscription assignments
    plan_type = db.Column(db.String(20), nullable=True)
    meals_per_week = db.Column(db.Integer, nullable=True)
    delivery_days = db.Column(db.JSON, nullable=True)
    meal_preferences = db.Column(db.JSON, nullable=True)

    notes = db.Column(db.Text)
    rating = db.Column(db.Integer)
    feedback = db.Column(db.Text)

    total_orders = db.Column(db.Integer, nullable=False, default=0)
    total_amount = db.Column(db.Float, nullable=False, default=0.0)
    last_order_date = db.Column(db.DateTime(timezone=True))

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref="assignments", lazy=True)
    chef = db.relationship("Chef", foreign_keys=[chef_id], backref="assignments", lazy=True)

    @property
    def is_subscription(self):
        return self.assignment_type == "subscription"

    @property
    def subscription_details(self):
        if not self.is_subscription:
            return None
        return {
            "planType": self.plan_type,
            "mealsPerWeek": self.meals_per_week,
            "deliveryDays": self.delivery_days,
            "mealPreferences": self.meal_preferences or {},
        }

    def is_active(self):
        if self.status != "active":
            return False
        if self.end_date is None:
            return True
        end = self.end_date
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        return end > datetime.now(timezone.utc)

    def can_receive_orders(self):
        return self.is_active() and bool(self.chef and self.chef.is_available)

    def append_note(self, note):
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        line = f"[{stamp}] {note}"
        self.notes = f"{self.notes}\n{line}" if self.notes else line


@event.listens_for(Assignment, "before_insert")
@event.listens_for(Assignment, "before_update")
def require_plan_type(mapper, connection, target):
    if target.assignment_type == "subscription" and not target.plan_type:
        raise ValueError("Subscription plan type is required for subscription assignments")
