from mealhub.extensions import db
from sqlalchemy.sql import func
import uuid

def gen_uuid(prefix=None):
    uid = str(uuid.uuid4())
    return f"{prefix}-{uid}" if prefix else uid

EMPTY_ADDRESS = {"street": "", "city": "", "state": "", "pincode": ""}

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(50), primary_key=True, default=lambda: gen_uuid("usr"))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120))
    phone = db.Column(db.String(30), unique=True, nullable=True)
    role = db.Column(db.String(20), nullable=False, default="user")
    household_size = db.Column(db.Integer, default=1)
    address = db.Column(db.JSON, nullable=True)
    account_status = db.Column(db.String(20), nullable=False, default="active")
    joined_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "role": self.role,
            "household_size": self.household_size,
            "address": self.address,
            "account_status": self.account_status,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
