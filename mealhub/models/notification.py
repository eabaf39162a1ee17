from mealhub.extensions import db
from sqlalchemy.sql import func
import uuid

def gen_notif_id():
    return f"notif-{str(uuid.uuid4())[:8]}"

class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.String(50), primary_key=True, default=gen_notif_id)
    sender_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=True)
    user_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False, index=True)

    type = db.Column(db.String(50), default="info")
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.JSON, nullable=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    sender = db.relationship("User", foreign_keys=[sender_id], lazy=True)
    recipient = db.relationship("User", foreign_keys=[user_id], backref="notifications", lazy=True)
