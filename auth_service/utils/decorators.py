"""
Authentication and role checks for views.

Access mode reads the `accessToken` cookie, falling back to an
`Authorization: Bearer <token>` header, and verifies it against the RS256
public key. Refresh mode reads only the `refreshToken` cookie, verifies it
against the HS256 secret, and then requires its backing RefreshToken row to
still exist. Every rejection is the same AuthenticationError (401).
"""
from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional

from flask import g, request

from auth_service.models.principal import Principal
from auth_service.models.user import Role
from auth_service.services.container import get_services
from auth_service.services.errors import AuthenticationError, ForbiddenError
from auth_service.services.refresh_token_store import RefreshTokenStore
from auth_service.services.token_service import TokenService
from auth_service.utils.cookies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE


def extract_token(req, cookie_name: str, allow_header: bool = True) -> Optional[str]:
    token = req.cookies.get(cookie_name)
    if token:
        return token
    if not allow_header:
        return None
    scheme, _, value = req.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def authenticate_access(req, tokens: TokenService) -> Principal:
    token = extract_token(req, ACCESS_TOKEN_COOKIE)
    if not token:
        raise AuthenticationError(reason="no access token")
    return tokens.decode_access_token(token)


def authenticate_refresh(req, tokens: TokenService, token_store: RefreshTokenStore) -> Principal:
    token = extract_token(req, REFRESH_TOKEN_COOKIE, allow_header=False)
    if not token:
        raise AuthenticationError(reason="no refresh token")
    principal = tokens.decode_refresh_token(token)
    # a valid signature is not enough: the row may have been rotated or revoked
    if not token_store.exists(principal.token_id):
        raise AuthenticationError(reason=f"refresh token {principal.token_id} is revoked")
    return principal


def can_access(role, allowed_roles: Iterable) -> bool:
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in {Role(r) for r in allowed_roles}


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.principal = authenticate_access(request, get_services().tokens)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def refresh_token_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            services = get_services()
            principal = authenticate_refresh(request, services.tokens, services.token_store)
            g.principal = principal
            g.refresh_token_id = principal.token_id
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(allowed_roles: Iterable[Role]):
    """
    Authenticate (access mode), then allow the request only if the
    principal's role is in allowed_roles. Unauthenticated -> 401, wrong role -> 403.
    """
    allowed = frozenset(Role(r) for r in allowed_roles)

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if not can_access(g.principal.role, allowed):
                raise ForbiddenError()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
