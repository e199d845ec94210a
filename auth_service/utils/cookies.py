"""
accessToken / refreshToken cookies: HttpOnly, SameSite=Strict.
"""
from __future__ import annotations

from flask import current_app

from auth_service.services.token_service import ACCESS_TOKEN_TTL, REFRESH_TOKEN_TTL

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _set(response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        httponly=True,
        samesite="Strict",
        secure=current_app.config.get("COOKIE_SECURE", False),
        domain=current_app.config.get("COOKIE_DOMAIN") or None,
        path="/",
    )


def set_auth_cookies(response, access_token: str, refresh_token: str) -> None:
    _set(response, ACCESS_TOKEN_COOKIE, access_token, int(ACCESS_TOKEN_TTL.total_seconds()))
    _set(response, REFRESH_TOKEN_COOKIE, refresh_token, int(REFRESH_TOKEN_TTL.total_seconds()))


def clear_auth_cookies(response) -> None:
    """Overwrite both cookies with an empty value that expires immediately."""
    _set(response, ACCESS_TOKEN_COOKIE, "", 0)
    _set(response, REFRESH_TOKEN_COOKIE, "", 0)
