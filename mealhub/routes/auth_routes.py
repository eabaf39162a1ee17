from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token
from mealhub.extensions import limiter
from mealhub.services.auth_service import register_user, authenticate_user, generate_tokens_for_user
from mealhub.utils.auth_utils import current_user
from mealhub.utils.exceptions import ServiceError
from mealhub.utils.response_formatter import success_response, error_response, service_error_response

bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")

@bp.route("/register", methods=["POST"])
@limiter.limit("20 per hour")
def register():
    data = request.get_json(silent=True) or {}
    first_name = data.get("first_name")
    email = data.get("email")
    password = data.get("password")

    if not all([first_name, email, password]):
        return error_response("VALIDATION_ERROR", "Missing required fields", status=422)
    if len(password) < 8:
        return error_response("VALIDATION_ERROR", "Password must be at least 8 characters", {"field": "password"}, status=422)

    try:
        user = register_user(
            email,
            password,
            first_name,
            last_name=data.get("last_name"),
            phone=data.get("phone"),
            household_size=data.get("household_size", 1),
            address=data.get("address"),
        )
    except ServiceError as e:
        return service_error_response(e)

    access, refresh = generate_tokens_for_user(user)
    return success_response({
        "user": user.to_dict(),
        "access_token": access,
        "refresh_token": refresh
    }, status=201)


@bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    data = request.get_json(silent=True) or {}

    try:
        user = authenticate_user(data.get("email"), data.get("password") or "")
    except ServiceError as e:
        return service_error_response(e)

    access, refresh = generate_tokens_for_user(user)
    return success_response({
        "access_token": access,
        "refresh_token": refresh,
        "user": user.to_dict(),
    })


@bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    user = current_user()
    if not user:
        return error_response("NOT_FOUND", "User not found", status=404)
    access = create_access_token(identity=get_jwt_identity(), additional_claims={"role": user.role})
    return success_response({"access_token": access})


@bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = current_user()
    if not user:
        return error_response("NOT_FOUND", "User not found", status=404)

    return success_response(user.to_dict())
