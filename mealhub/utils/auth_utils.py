from functools import wraps
from flask_jwt_extended import jwt_required, get_jwt_identity
from mealhub.extensions import bcrypt, db
from mealhub.models.user import User
from mealhub.utils.response_formatter import error_response

def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")

def check_password(password, hashed_password):
    return bcrypt.check_password_hash(hashed_password, password)

def current_user():
    return db.session.get(User, get_jwt_identity())

def admin_required(fn):
    """Require a valid access token belonging to an admin account."""
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = current_user()
        if not user or user.role != "admin":
            return error_response("FORBIDDEN", "Admin privileges required", status=403)
        return fn(*args, **kwargs)
    return wrapper
