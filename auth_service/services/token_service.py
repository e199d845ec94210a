"""
Token issuance and verification.

- access tokens: RS256, signed with the private key, 1 hour
- refresh tokens: HS256, signed with the shared secret, 1 year, `jti` set to
  the id of the RefreshToken row that backs them

Decoding pins the algorithm and the issuer. Every verification failure is an
AuthenticationError with the same outward message; a key-material fault is a
ConfigurationError instead.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable

import jwt

from auth_service.models.principal import Principal
from auth_service.services.errors import AuthenticationError
from auth_service.utils.keys import KeyProvider

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ALGORITHM = "RS256"
REFRESH_TOKEN_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=365)
DEFAULT_ISSUER = "auth-service"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(self, key_provider: KeyProvider, issuer: str = DEFAULT_ISSUER):
        self.keys = key_provider
        self.issuer = issuer

    def _payload(self, principal: Principal, ttl: timedelta) -> Dict[str, Any]:
        now = _now()
        payload = principal.to_claims()
        payload.update(
            {
                "iss": self.issuer,
                "iat": int(now.timestamp()),
                "exp": int((now + ttl).timestamp()),
            }
        )
        return payload

    def issue_access_token(self, principal: Principal) -> str:
        payload = self._payload(principal, ACCESS_TOKEN_TTL)
        return jwt.encode(
            payload,
            self.keys.private_key(),
            algorithm=ACCESS_TOKEN_ALGORITHM,
            headers={"kid": self.keys.key_id},
        )

    def issue_refresh_token(self, principal: Principal, token_id: int) -> str:
        payload = self._payload(principal, REFRESH_TOKEN_TTL)
        payload["id"] = token_id
        payload["jti"] = str(token_id)
        return jwt.encode(payload, self.keys.refresh_secret(), algorithm=REFRESH_TOKEN_ALGORITHM)

    def decode_access_token(self, token: str) -> Principal:
        return self._decode(
            token,
            self.keys.public_key(),
            ACCESS_TOKEN_ALGORITHM,
            required=("exp", "iat", "iss", "sub"),
        )

    def decode_refresh_token(self, token: str) -> Principal:
        return self._decode(
            token,
            self.keys.refresh_secret(),
            REFRESH_TOKEN_ALGORITHM,
            required=("exp", "iss", "sub", "jti"),
        )

    def _decode(self, token: str, key, algorithm: str, required: Iterable[str]) -> Principal:
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=[algorithm],
                issuer=self.issuer,
                options={"require": list(required)},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(reason="token expired")
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(reason=f"invalid token: {exc}")

        try:
            return Principal.from_claims(claims)
        except (KeyError, ValueError) as exc:
            raise AuthenticationError(reason=f"malformed claims: {exc}")
