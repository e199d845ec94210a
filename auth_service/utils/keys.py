"""
Key material for token signing.

- RSA private key (access tokens, RS256); the public key is read from its own
  PEM when configured, otherwise derived from the private key
- shared secret for refresh tokens (HS256)

Keys may be given inline (PEM text) or as file paths. They are loaded on first
use and cached; a missing or unreadable key raises ConfigurationError.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from jwt.algorithms import RSAAlgorithm

from auth_service.services.errors import ConfigurationError

logger = logging.getLogger(__name__)


class KeyProvider:
    def __init__(
        self,
        *,
        private_key: Optional[str] = None,
        private_key_path: Optional[str] = None,
        public_key: Optional[str] = None,
        public_key_path: Optional[str] = None,
        refresh_secret: Optional[str] = None,
        key_id: str = "auth-service",
    ):
        self._private_key_pem = private_key
        self._private_key_path = private_key_path
        self._public_key_pem = public_key
        self._public_key_path = public_key_path
        self._refresh_secret = refresh_secret
        self.key_id = key_id
        self._private_key: Optional[RSAPrivateKey] = None
        self._public_key: Optional[RSAPublicKey] = None

    @classmethod
    def from_config(cls, config) -> "KeyProvider":
        return cls(
            private_key=config.get("PRIVATE_KEY"),
            private_key_path=config.get("PRIVATE_KEY_PATH"),
            public_key=config.get("PUBLIC_KEY"),
            public_key_path=config.get("PUBLIC_KEY_PATH"),
            refresh_secret=config.get("REFRESH_TOKEN_SECRET"),
            key_id=config.get("JWT_KEY_ID", "auth-service"),
        )

    @staticmethod
    def _read_pem(inline: Optional[str], path: Optional[str], what: str) -> Optional[bytes]:
        if inline:
            return inline.encode("utf-8")
        if not path:
            return None
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            logger.error("Could not read %s from %s: %s", what, path, exc)
            raise ConfigurationError(f"Error while reading {what}") from exc

    def private_key(self) -> RSAPrivateKey:
        if self._private_key is None:
            pem = self._read_pem(self._private_key_pem, self._private_key_path, "private key")
            if pem is None:
                raise ConfigurationError("Error while reading private key")
            try:
                self._private_key = serialization.load_pem_private_key(pem, password=None)
            except (ValueError, TypeError) as exc:
                logger.error("Private key is not a valid PEM RSA key: %s", exc)
                raise ConfigurationError("Error while reading private key") from exc
        return self._private_key

    def public_key(self) -> RSAPublicKey:
        if self._public_key is None:
            pem = self._read_pem(self._public_key_pem, self._public_key_path, "public key")
            if pem is None:
                self._public_key = self.private_key().public_key()
            else:
                try:
                    self._public_key = serialization.load_pem_public_key(pem)
                except (ValueError, TypeError) as exc:
                    logger.error("Public key is not a valid PEM RSA key: %s", exc)
                    raise ConfigurationError("Error while reading public key") from exc
        return self._public_key

    def refresh_secret(self) -> str:
        if not self._refresh_secret:
            raise ConfigurationError("Refresh token secret is not configured")
        return self._refresh_secret

    def validate(self) -> None:
        """Load every key up front; raises ConfigurationError on the first missing one."""
        self.private_key()
        self.public_key()
        self.refresh_secret()

    def jwks(self) -> Dict[str, Any]:
        """JWK set publishing the access-token verification key."""
        jwk = json.loads(RSAAlgorithm.to_jwk(self.public_key()))
        jwk.update({"use": "sig", "alg": "RS256", "kid": self.key_id})
        return {"keys": [jwk]}
