# controllers/auth_controller.py
from flask import Blueprint, request, g
from controllers.auth_helpers import auth_required
from services.user_service import UserService
from services.token_service import TokenService
from utils.exceptions import ValidationError
from utils.response import json_response


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    user = UserService.register(
        email=data.get("email"),
        password=data.get("password"),
        username=data.get("username"),
        first_name=data.get("firstName"),
        last_name=data.get("lastName"),
    )
    return json_response(
        message="User registered successfully",
        data={"user": user.to_dict(), "tokens": TokenService.issue(user.id)},
        code=201,
    )


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    user = UserService.authenticate(data.get("email"), data.get("password"))
    return json_response(
        message="Login successful",
        data={"user": user.to_dict(), "tokens": TokenService.issue(user.id)},
    )


@auth_bp.post("/refresh")
def refresh():
    data = request.get_json(silent=True) or {}
    refresh_token = data.get("refreshToken")
    if not refresh_token:
        raise ValidationError("refreshToken is required")
    return json_response(message="Token refreshed", data={"tokens": TokenService.refresh(refresh_token)})


@auth_bp.post("/logout")
@auth_required()
def logout():
    data = request.get_json(silent=True) or {}
    TokenService.revoke(g.access_token, data.get("refreshToken"))
    return json_response(message="Logged out")


@auth_bp.get("/profile")
@auth_required()
def profile():
    return json_response(data=g.current_user.to_dict())
