from mealhub.extensions import db
from sqlalchemy import text
from sqlalchemy.sql import func
import uuid

def gen_order_id():
    return f"ORD-{uuid.uuid4().hex[:12]}"

ORDER_STATUSES = ("new", "confirmed", "preparing", "on_the_way", "delivered", "cancelled", "rejected")

class Order(db.Model):
    __tablename__ = "orders"

    __table_args__ = (
        db.Index("idx_orders_user_status", "user_id", "status"),
        db.Index("idx_orders_chef_status", "chef_id", "status"),
        db.Index("idx_orders_assignment_status", "assignment_id", "status"),
        db.Index("idx_orders_scheduled_date", "scheduled_date"),
        # a subscription delivers at most once per day; cancelled rows do not count
        db.Index(
            "uq_orders_assignment_scheduled_date",
            "assignment_id",
            "scheduled_date",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_order_id)

    user_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)
    chef_id = db.Column(db.String(50), db.ForeignKey("chefs.id"), nullable=True)
    assignment_id = db.Column(db.String(50), db.ForeignKey("assignments.id"), nullable=True)

    food_name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    number_of_persons = db.Column(db.Integer, default=1)

    scheduled_date = db.Column(db.Date)
    scheduled_time = db.Column(db.String(10))
    special_instructions = db.Column(db.Text)
    delivery_address = db.Column(db.JSON, default=dict)

    estimated_price = db.Column(db.Float, default=0.0)
    actual_price = db.Column(db.Float, default=0.0)

    status = db.Column(db.String(20), nullable=False, default="new")
    cancel_reason = db.Column(db.Text)
    cancelled_by = db.Column(db.String(20))

    order_type = db.Column(db.String(20), nullable=False, default="individual")

    # subscription metadata
    is_subscription_order = db.Column(db.Boolean, nullable=False, default=False)
    subscription_id = db.Column(db.String(50), db.ForeignKey("assignments.id"), nullable=True, index=True)
    delivery_day = db.Column(db.String(10))
    week_number = db.Column(db.Integer)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref="orders", lazy=True)
    chef = db.relationship("Chef", foreign_keys=[chef_id], backref="orders", lazy=True)
    assignment = db.relationship(
        "Assignment",
        foreign_keys=[assignment_id],
        backref=db.backref("orders", lazy="dynamic"),
        lazy=True,
    )

    @property
    def subscription_order(self):
        return {
            "isSubscriptionOrder": self.is_subscription_order,
            "subscriptionId": self.subscription_id,
            "deliveryDay": self.delivery_day,
            "weekNumber": self.week_number,
        }
