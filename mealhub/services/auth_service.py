from mealhub.extensions import db
from mealhub.models.user import User
from mealhub.utils.auth_utils import hash_password, check_password
from mealhub.utils.exceptions import ServiceError
from flask_jwt_extended import create_access_token, create_refresh_token
from datetime import timedelta
from flask import current_app

def register_user(email, password, first_name, last_name=None, phone=None, household_size=1, address=None):
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise ServiceError(
            code="USER_EXISTS",
            message="User with that email already exists",
            details={"field": "email"},
            status=409,
        )
    if phone and User.query.filter_by(phone=phone).first():
        raise ServiceError(
            code="USER_EXISTS",
            message="User with that phone number already exists",
            details={"field": "phone"},
            status=409,
        )

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        role="user",
        household_size=household_size or 1,
        address=address,
    )
    db.session.add(user)
    db.session.commit()
    return user

def authenticate_user(email, password):
    user = User.query.filter_by(email=(email or "").strip().lower()).first()
    if not user or not check_password(password, user.password_hash):
        raise ServiceError(code="AUTH_FAILED", message="Invalid credentials", status=401)
    if user.account_status != "active":
        raise ServiceError(code="ACCOUNT_INACTIVE", message="Account is not active", status=403)
    return user

def generate_tokens_for_user(user):
    claims = {"role": user.role}
    access = create_access_token(
        identity=user.id,
        additional_claims=claims,
        expires_delta=timedelta(seconds=current_app.config.get("ACCESS_EXPIRES", 86400)),
    )
    refresh = create_refresh_token(
        identity=user.id,
        additional_claims=claims,
        expires_delta=timedelta(seconds=current_app.config.get("REFRESH_EXPIRES", 86400)),
    )
    return access, refresh
