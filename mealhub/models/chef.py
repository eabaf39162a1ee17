from mealhub.extensions import db
from mealhub.models.user import gen_uuid
from sqlalchemy.sql import func

class Chef(db.Model):
    __tablename__ = "chefs"

    id = db.Column(db.String(50), primary_key=True, default=lambda: gen_uuid("chf"))
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(30), unique=True, nullable=False)
    cuisine_specialty = db.Column(db.JSON, default=list)
    rating = db.Column(db.Float, default=0.0)
    is_available = db.Column(db.Boolean, default=True, nullable=False)
    account_status = db.Column(db.String(20), nullable=False, default="active")
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
