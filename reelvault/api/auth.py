"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me

The refresh token travels only in an HTTP-only `refreshToken` cookie; the
access token is returned in the body and presented back as a Bearer header.
Token policy lives in services.auth_service; this module maps it onto HTTP.
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, g, jsonify, make_response, request
from marshmallow import ValidationError

from reelvault.api.errors import error_response
from reelvault.models import storage
from reelvault.models.schemas.user import CredentialsSchema, UserMeOutSchema, UserOutSchema
from reelvault.services.auth_service import AuthResult, AuthService
from reelvault.services.exceptions import InvalidInput
from reelvault.utils.decorators import bearer_token_required

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

auth_service = AuthService(storage)

credentials_schema = CredentialsSchema()
user_out_schema = UserOutSchema()
user_me_out_schema = UserMeOutSchema()


def _load_credentials() -> dict:
    payload = request.get_json(silent=True) or {}
    try:
        return credentials_schema.load(payload)
    except ValidationError:
        raise InvalidInput("Email and password are required") from None


def _set_refresh_cookie(response, value: str, max_age: int):
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


def _session_response(result: AuthResult, status: int):
    response = make_response(
        jsonify(
            {
                "user": user_out_schema.dump(result.user),
                "accessToken": result.access_token,
            }
        ),
        status,
    )
    max_age = int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds())
    return _set_refresh_cookie(response, result.refresh_token, max_age)


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created (sets the refreshToken cookie)
      400:
        description: Missing fields, invalid email or weak password
      409:
        description: Email already registered
    """
    data = _load_credentials()
    result = auth_service.register(data["email"], data["password"])
    return _session_response(result, 201)


@bp.post("/login")
def login():
    """
    Login: returns an access token and sets the refreshToken cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Missing fields or invalid email format
      401:
        description: Invalid email or password
    """
    data = _load_credentials()
    result = auth_service.login(data["email"], data["password"])
    return _session_response(result, 200)


@bp.post("/refresh")
def refresh():
    """
    Rotate the refreshToken cookie and mint a new access token
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK (sets a new refreshToken cookie)
      401:
        description: Missing, invalid, expired or already-used refresh token
    """
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    result = auth_service.refresh(token)
    return _session_response(result, 200)


@bp.post("/logout")
def logout():
    """
    Logout: revokes the presented refresh token and clears the cookie
    ---
    tags:
      - Auth
    responses:
      200:
        description: Logged out (always, even for a missing or invalid cookie)
    """
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    try:
        auth_service.logout(token)
    except Exception:
        logger.exception("Logout error")
        body, status = error_response("INTERNAL_ERROR", "Internal server error", 500)
        return _set_refresh_cookie(make_response(body, status), "", 0)

    response = make_response(jsonify({"message": "Logged out successfully"}), 200)
    return _set_refresh_cookie(response, "", 0)


@bp.get("/me")
@bearer_token_required()
def me():
    """
    Get the current user from the access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Missing, invalid or expired access token
      404:
        description: User no longer exists
    """
    user = auth_service.get_current_user(g.access_token)
    return jsonify({"user": user_me_out_schema.dump(user)}), 200
