"""
Register / login / refresh / logout / self.

Each operation returns once everything it needs has succeeded; the caller
sets cookies from the returned AuthResult, so a failing operation never
leaves half-written cookies behind.

Rotation has no cross-operation transaction. Two concurrent refreshes with
the same token can both pass the liveness check before either deletes the
old row; each then mints its own successor. This is accepted: the old row is
gone either way and both successors are bound to the same user.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from auth_service.models.principal import Principal
from auth_service.models.user import Role, User
from auth_service.services.errors import BadCredentialsError, BadRequestError, ServiceError
from auth_service.services.refresh_token_store import RefreshTokenStore
from auth_service.services.token_service import TokenService
from auth_service.services.user_service import UserService
from auth_service.utils.security import verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user_id: int
    access_token: str
    refresh_token: str


class AuthFlow:
    def __init__(self, users: UserService, tokens: TokenService, token_store: RefreshTokenStore):
        self.users = users
        self.tokens = tokens
        self.token_store = token_store

    def _issue(self, user: User) -> AuthResult:
        """Persist a new record and sign both tokens; a signing failure revokes the record."""
        principal = Principal.from_user(user)
        record = self.token_store.persist(user)
        try:
            access_token = self.tokens.issue_access_token(principal)
            refresh_token = self.tokens.issue_refresh_token(principal, record.id)
        except ServiceError:
            self.token_store.revoke(record.id)
            raise
        return AuthResult(user_id=user.id, access_token=access_token, refresh_token=refresh_token)

    def _user_for(self, principal: Principal) -> User:
        try:
            user_id = int(principal.subject)
        except ValueError:
            raise BadRequestError("User with the token could not be found")
        user = self.users.find_by_id(user_id)
        if user is None:
            raise BadRequestError("User with the token could not be found")
        return user

    def register(self, data: Mapping[str, Any]) -> AuthResult:
        user = self.users.create(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            password=data["password"],
            role=Role.CUSTOMER.value,
        )
        logger.info("User has been registered", extra={"user_id": user.id})
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.users.find_by_email_with_password(email)
        if user is None or not verify_password(password, user.password_hash):
            raise BadCredentialsError()
        result = self._issue(user)
        logger.info("User has been logged in", extra={"user_id": user.id})
        return result

    def refresh(self, principal: Principal) -> AuthResult:
        """
        Rotate: persist a new record and sign a fresh pair, then delete the
        presented record. If signing fails the presented record stays live.
        """
        user = self._user_for(principal)
        result = self._issue(user)
        self.token_store.revoke(principal.token_id)
        logger.info(
            "Refresh token rotated",
            extra={"user_id": user.id, "old_token_id": principal.token_id},
        )
        return result

    def logout(self, principal: Principal) -> None:
        self.token_store.revoke(principal.token_id)
        logger.info("User has been logged out", extra={"user_id": principal.subject, "token_id": principal.token_id})

    def get_self(self, principal: Principal) -> User:
        return self._user_for(principal)
