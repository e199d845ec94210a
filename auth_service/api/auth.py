"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- GET  /auth/self
- POST /auth/refresh
- POST /auth/logout

Tokens travel in HttpOnly cookies:
- accessToken: RS256, 1 hour
- refreshToken: HS256, 1 year, backed by a RefreshToken row that is rotated
  on every refresh and deleted on logout
"""
from __future__ import annotations

import logging

from flask import Blueprint, g, jsonify, make_response, request

from auth_service.models.schemas.user import LoginSchema, RegisterSchema, UserOutSchema
from auth_service.services.auth_flow import AuthResult
from auth_service.services.container import get_services
from auth_service.utils.cookies import clear_auth_cookies, set_auth_cookies
from auth_service.utils.decorators import jwt_required, refresh_token_required

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_out_schema = UserOutSchema()


def _auth_response(result: AuthResult, status: int):
    response = make_response(jsonify({"id": result.user_id}), status)
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return response


@bp.post("/register")
def register():
    """
    Register a new customer and sign them in.
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
          required: [firstName, lastName, email, password]
          properties:
            firstName: { type: string }
            lastName: { type: string }
            email: { type: string }
            password: { type: string, minLength: 8 }
    responses:
      201:
        description: Created; accessToken and refreshToken cookies are set
      400:
        description: Validation error or email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)
    logger.debug("New request to register a user", extra={"email": data["email"]})

    result = get_services().auth_flow.register(data)
    return _auth_response(result, 201)


@bp.post("/login")
def login():
    """
    Login with email and password.
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
        description: OK; accessToken and refreshToken cookies are set
      400:
        description: Validation error, or email/password does not match
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)

    result = get_services().auth_flow.login(data["email"], data["password"])
    return _auth_response(result, 200)


@bp.get("/self")
@jwt_required()
def get_self():
    """
    The authenticated user. The password is never included.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = get_services().auth_flow.get_self(g.principal)
    return jsonify(user_out_schema.dump(user)), 200


@bp.post("/refresh")
@refresh_token_required()
def refresh():
    """
    Rotate the refresh token and issue a new access token.
    The presented refresh token is revoked and cannot be used again.
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK; both cookies are replaced
      401:
        description: Missing, invalid, expired or revoked refresh token
    """
    result = get_services().auth_flow.refresh(g.principal)
    return _auth_response(result, 200)


@bp.post("/logout")
@refresh_token_required()
def logout():
    """
    Revoke the refresh token and clear both cookies.
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK
      401:
        description: Missing, invalid, expired or revoked refresh token
    """
    get_services().auth_flow.logout(g.principal)
    response = make_response(jsonify({}), 200)
    clear_auth_cookies(response)
    return response
